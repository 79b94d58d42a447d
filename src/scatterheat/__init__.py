"""Interactive scatter/heatmap charts rendered from remote JSON datasets."""
