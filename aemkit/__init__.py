"""Read AEM model files, evaluate their skeletal animations and keep a model viewer's state."""

__version__ = "0.1.0"

__all__ = ["util", "model", "animation", "animation_state", "camera", "input"]