"""
schemadoc - configuration schema resolution and reference documentation generator.

Package structure:
    schema/      Schema loading, fragment resolution, models and validation
    render/      Markdown pages, example TOML, release notes, metadata export
    generator    Build orchestration and output writing
    cli          Command-line entry point
"""

__version__ = "0.1.0"
