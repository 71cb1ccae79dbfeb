# src/generators/__init__.py
"""
Bundled generators.

Every module below this directory is discovered by
pipeline.plugins.DirectoryGeneratorLoader and must expose:

    def generate(pack_path: Path, build_path: Path, context: PipelineContext) -> None

plus optional LOAD_PRIORITY (int, lower runs first, default 1) and
GENERATOR_NAME. Files whose name starts with "_" are not loaded.
"""
