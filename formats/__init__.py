"""Container configuration formats handled by GameNative Config Tools.

Each sub-package (currently only ``gamenative``) is pure Python with no
third-party runtime dependencies, so it can be imported and tested without
the Qt shell::

    from formats.gamenative import convert_text, build_export

    config = convert_text(raw_dump)
    export = build_export(config)
    print(export.to_json())

The GUI in :mod:`gntools.ui` is a thin layer over these functions.
"""
