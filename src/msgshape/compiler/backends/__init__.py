from msgshape.compiler.backends.json_dump import JsonModelDumper

__all__ = ["JsonModelDumper"]
