"""Use-case layer between the view model and the user source port.

Modules here call ports and translate their failures into domain errors
without performing transport I/O themselves.
"""
