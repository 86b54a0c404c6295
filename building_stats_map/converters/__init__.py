from .name_normalizer import normalize, build_key, KEY_SEPARATOR

__all__ = ['normalize', 'build_key', 'KEY_SEPARATOR']
