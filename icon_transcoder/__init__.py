"""
Icon Transcoder Package.

Converts resolved vector-graphics scene trees into Java 2D source code, so
icons can be compiled into applications without runtime vector parsing.

Subpackages:
    scene: Scene tree vocabulary and the scene.v1 document loader
    codegen: Literal formatting, tree walking, chunking and packaging
    configs: Transcoder configuration loading and validation
    batch: Directory conversion
    utils: Filesystem and logging helpers
    scripts: Command-line entrypoints
"""

__version__ = "0.1.0"

__all__ = ["scene", "codegen", "configs", "batch", "utils", "scripts"]
