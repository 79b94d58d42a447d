"""
The CONTROLLER layer turns a Dataset into geometry (scales, binder) and owns
the interaction, resize and loading logic of a chart instance.
"""
