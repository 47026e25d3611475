"""
Generator registry – plugin system for image generation backends.

Register your custom generator with::

    from cardiograph.generation import GeneratorRegistry, BaseGenerator

    @GeneratorRegistry.register("my-provider")
    class MyGenerator(BaseGenerator):
        def generate(self, request):
            ...
"""

from __future__ import annotations

from typing import Any, Dict, Type

from cardiograph.generation.base import BaseGenerator


class GeneratorRegistry:
    """Central registry for image generation backends.

    Provides decorator-based registration and factory instantiation.
    """

    _registry: Dict[str, Type[BaseGenerator]] = {}

    @classmethod
    def register(cls, name: str):
        """Decorator to register a generator class under a given name.

        Parameters:
            name: Identifier for the generator (e.g., ``"gemini"``).
        """

        def decorator(generator_cls: Type[BaseGenerator]):
            if not issubclass(generator_cls, BaseGenerator):
                raise TypeError(f"{generator_cls.__name__} must subclass BaseGenerator")
            cls._registry[name.lower()] = generator_cls
            return generator_cls

        return decorator

    @classmethod
    def create(cls, name: str, **kwargs: Any) -> BaseGenerator:
        """Instantiate a registered generator by name.

        Parameters:
            name: Registered name of the generator.
            **kwargs: Keyword arguments forwarded to the constructor.

        Returns:
            An instance of the registered generator.

        Raises:
            KeyError: If the name is not registered.
        """
        name_lower = name.lower()
        if name_lower not in cls._registry:
            available = ", ".join(sorted(cls._registry.keys()))
            raise KeyError(
                f"Generator '{name}' not found. "
                f"Available: [{available}]. "
                f"Register custom generators with "
                f"@GeneratorRegistry.register('{name}')"
            )
        generator_cls = cls._registry[name_lower]
        return generator_cls(model_name=name_lower, **kwargs)

    @classmethod
    def from_config(cls, config) -> BaseGenerator:
        """Instantiate the generator described by an :class:`AppConfig`."""
        return cls.create(
            config.generator,
            model=config.model,
            api_key=config.api_key,
            **config.generator_params,
        )

    @classmethod
    def available(cls) -> list[str]:
        """Return a sorted list of all registered generator names."""
        return sorted(cls._registry.keys())
