"""
Command-line scripts for the hillshading backend.

- generate_hillshade: Shade an HGT tile and save it as grayscale PNG
"""
