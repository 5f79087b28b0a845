"""
Command-line interface: the Typer application and Rich console formatters.
"""
