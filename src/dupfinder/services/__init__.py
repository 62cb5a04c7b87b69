from .report_service import ReportService
from .script_service import ScriptService, BashScriptRenderer, PowerShellScriptRenderer

__all__ = ["ReportService", "ScriptService", "BashScriptRenderer", "PowerShellScriptRenderer"]
