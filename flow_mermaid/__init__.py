from .convert import ConversionResult, RenderConfig, convert_definition, extract_actions, flow_to_mermaid
from .diagnostics import Diagnostic, DiagnosticLog
from .errors import ActionsNotFoundError, FlowConversionError, FlowParseError

__all__ = [
    "ActionsNotFoundError",
    "ConversionResult",
    "Diagnostic",
    "DiagnosticLog",
    "FlowConversionError",
    "FlowParseError",
    "RenderConfig",
    "convert_definition",
    "extract_actions",
    "flow_to_mermaid",
]
