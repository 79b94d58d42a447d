"""
The MODEL layer contains the typed records, the dataset container and the
selection state. Parsing and fetching of the raw JSON lives in `io`.
It has NO knowledge of scales, geometry or widgets.
"""
