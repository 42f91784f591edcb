# backend/previewer/services/preview_pipeline/utils/variant_planner.py
"""
Variant Planner

Decides which image each variant spec is derived from. Specs are processed
in configuration order and never reordered; a spec's base is resolved with
an explicit fallback chain:

    1. the variant named by `from`, if already produced this run
    2. the `orig` variant, if already produced this run
    3. the raw source image with the default format
"""

from typing import Dict, List, Mapping, Optional, Tuple

from ....constants import ORIG_VARIANT_KEY
from ....enums import LoggerName, LogSource
from ....exceptions import ConfigurationError
from ....models import RawImage, Variant, VariantSpec
from ...logger import get_service_logger

logger = get_service_logger(LoggerName.VARIANT_PLANNER, LogSource.PIPELINE)

# Name reported for the raw source when it is used as a base
RAW_SOURCE_KEY = "<source>"


class VariantPlanner:
    """Resolves base images for variant specs within one pipeline run."""

    def __init__(self, raw_image: RawImage, default_format: str, strict: bool = False):
        """
        Args:
            raw_image: The buffered source image
            default_format: Format of the raw source used as a base
            strict: Reject `from` references that cannot be satisfied in order
        """
        self.raw_image = raw_image
        self.default_format = default_format
        self.strict = strict

    def plan(self, resize: Mapping[str, VariantSpec]) -> List[VariantSpec]:
        """
        Processing order for the configured specs (configuration order).

        Raises:
            ConfigurationError: In strict mode, when a `from` names an unknown
                key or a key configured after the referencing spec
        """
        ordered = list(resize.values())
        if self.strict:
            self.validate_references(ordered)
        return ordered

    @staticmethod
    def validate_references(specs: List[VariantSpec]) -> None:
        all_keys = {spec.key for spec in specs}
        seen = set()
        for spec in specs:
            target = spec.from_
            if target is not None:
                if target not in all_keys:
                    raise ConfigurationError(
                        f"Variant '{spec.key}' derives from unknown variant '{target}'"
                    )
                if target not in seen:
                    raise ConfigurationError(
                        f"Variant '{spec.key}' derives from '{target}', "
                        f"which is configured after it"
                    )
            seen.add(spec.key)

    def resolve_base(
        self, spec: VariantSpec, previews: Dict[str, Variant]
    ) -> Tuple[RawImage, str, str]:
        """
        Pick the base image for a spec.

        Args:
            spec: The spec about to be processed
            previews: Variants produced so far in this run

        Returns:
            (base image, base format, key of the base) tuple
        """
        base = self._lookup(spec.from_, previews)
        if base is None:
            if spec.from_ is not None:
                logger.debug(
                    f"Variant '{spec.key}': '{spec.from_}' not produced yet, falling back",
                    extra_context={"key": spec.key, "from": spec.from_},
                )
            base = self._lookup(ORIG_VARIANT_KEY, previews)

        if base is not None:
            return base.image, base.type, base.key

        return self.raw_image, self.default_format, RAW_SOURCE_KEY

    @staticmethod
    def _lookup(key: Optional[str], previews: Dict[str, Variant]) -> Optional[Variant]:
        if key is None:
            return None
        return previews.get(key)
