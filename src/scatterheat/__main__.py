"""Allows `python -m scatterheat [scatter|heatmap]`."""
from scatterheat.main import main

main()
