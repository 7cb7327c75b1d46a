from faultpack.protocol.builder import EnvelopeBuilder, EnvelopeItemBuilder

__all__ = ["EnvelopeBuilder", "EnvelopeItemBuilder"]
