"""
The VIEW layer: Qt widgets that paint geometry and text renderers that
observe the selection store.
"""
