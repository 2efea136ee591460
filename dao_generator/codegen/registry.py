"""
Registry of target-language generators.

Generators are registered under a primary name plus optional aliases;
the CLI and :func:`generate_daos` look them up by either.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, Union

from ..logging_config import get_logger
from .core.config import GeneratorConfig, load_config
from .core.generator import CodeGenerator

logger = get_logger(__name__)

ConfigSource = Union[GeneratorConfig, Dict[str, Any], str, Path, None]


class RegistryError(Exception):
    """Raised for unknown languages and invalid registrations."""

    pass


@dataclass
class RegisteredGenerator:
    language: str
    generator_class: Type[CodeGenerator]
    aliases: List[str] = field(default_factory=list)


class GeneratorRegistry:
    """Maps language names and aliases to generator classes."""

    def __init__(self):
        self._entries: Dict[str, RegisteredGenerator] = {}
        self._aliases: Dict[str, str] = {}

    def register(
        self,
        language: str,
        generator_class: Type[CodeGenerator],
        aliases: Optional[List[str]] = None,
        replace: bool = False,
    ):
        """
        Register ``generator_class`` for ``language``.

        An existing registration is kept unless ``replace`` is set.

        Raises:
            RegistryError: If the class is not a CodeGenerator or an alias
                is already taken by another language
        """
        if not (isinstance(generator_class, type) and issubclass(generator_class, CodeGenerator)):
            raise RegistryError("Generator class must inherit from CodeGenerator")

        key = language.lower()
        if key in self._entries and not replace:
            logger.debug("Generator for %s already registered", key)
            return

        alias_keys = [a.lower() for a in aliases or [] if a.lower() != key]
        if not replace:
            for alias in alias_keys:
                if alias in self._entries:
                    raise RegistryError(f"Alias '{alias}' conflicts with existing primary language")
                owner = self._aliases.get(alias)
                if owner and owner != key:
                    raise RegistryError(f"Alias '{alias}' already points to '{owner}'")

        self._entries[key] = RegisteredGenerator(key, generator_class, sorted(alias_keys))
        for alias in alias_keys:
            self._aliases[alias] = key

    def resolve_name(self, language: str) -> str:
        """Primary name for ``language``, which may be an alias."""
        key = language.lower()
        return self._aliases.get(key, key)

    def _entry(self, language: str) -> RegisteredGenerator:
        entry = self._entries.get(self.resolve_name(language))
        if entry is None:
            raise RegistryError(
                f"No generator registered for language: {language}. "
                f"Available: {', '.join(self.list_languages())}"
            )
        return entry

    def get_generator_class(self, language: str) -> Type[CodeGenerator]:
        return self._entry(language).generator_class

    def create_generator(self, language: str, config: ConfigSource = None) -> CodeGenerator:
        """
        Instantiate the generator for ``language``.

        ``config`` may be a ready GeneratorConfig, a dict of overrides, or
        the path of a JSON configuration file.
        """
        entry = self._entry(language)

        if config is not None and not isinstance(config, (GeneratorConfig, dict, str, Path)):
            raise RegistryError(f"Invalid config type: {type(config)}")

        try:
            if isinstance(config, GeneratorConfig):
                final_config = config
            elif isinstance(config, dict):
                final_config = load_config(entry.language, custom_config=config)
            else:
                final_config = load_config(entry.language, config_file=config)
            return entry.generator_class(final_config)
        except Exception as e:
            raise RegistryError(f"Failed to create {language} generator: {e}") from e

    def list_languages(self) -> List[str]:
        return sorted(self._entries)

    def is_supported(self, language: str) -> bool:
        return self.resolve_name(language) in self._entries

    def get_language_info(self, language: str) -> Dict[str, Any]:
        """Name, class, extension and aliases of a registered language."""
        entry = self._entry(language)
        generator = entry.generator_class(load_config(entry.language))
        return {
            "name": generator.language_name,
            "class": entry.generator_class.__name__,
            "file_extension": generator.file_extension,
            "aliases": list(entry.aliases),
            "module": entry.generator_class.__module__,
        }


_global_registry: Optional[GeneratorRegistry] = None


def get_registry() -> GeneratorRegistry:
    """Process-wide registry with the built-in generators loaded."""
    global _global_registry
    if _global_registry is None:
        _global_registry = GeneratorRegistry()
        _register_builtin_generators(_global_registry)
    return _global_registry


def _register_builtin_generators(registry: GeneratorRegistry):
    # Imported here: the language packages import this module's siblings
    from .languages.php import PhpGenerator

    registry.register("php", PhpGenerator, aliases=["dao-php"])


def get_generator(language: str, config: ConfigSource = None) -> CodeGenerator:
    return get_registry().create_generator(language, config)


def list_supported_languages() -> List[str]:
    return get_registry().list_languages()


def is_language_supported(language: str) -> bool:
    return get_registry().is_supported(language)


def get_language_info(language: str) -> Dict[str, Any]:
    return get_registry().get_language_info(language)
