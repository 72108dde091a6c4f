from wsl_exec.gateway.gateway import Gateway, ToolResponse, format_output

__all__ = ["Gateway", "ToolResponse", "format_output"]
