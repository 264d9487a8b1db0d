# packages/bmpwf/src/bmpwf/cli/__init__.py
# Entrées console : bmp-info, bmp-convert
