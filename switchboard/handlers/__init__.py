"""Built-in command and component handlers.

Every module in this package is imported by discover("switchboard.handlers")
at startup, which registers the handlers declared with @command,
@component and @component_pattern.
"""
