"""ViewModel package for UI state and command surfaces.

Call context:
    ``userdir/web_ui/runtime.py`` builds the directory view model and binds
    NiceGUI controls to its setters and commands.

Dependencies:
    Modules in this package depend on domain types, the fetch use case and
    small formatting helpers. Transport details stay in the adapters.
"""
