"""Configuration service - YAML persistence for ``SpecHarvestConfig``.

This service provides a class-based interface with configurable paths.
"""

import logging
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from specharvest.app_utils.config_schema import SpecHarvestConfig
from specharvest.app_utils.paths import get_config_file
from specharvest.core.scoring import ConfidenceTier, confidence_tier
from specharvest.services.backend import AnalysisOptions
from specharvest.services.export_service import ExportOptions

logger = logging.getLogger(__name__)


class ConfigService:
    """Service for managing Spec Harvest configuration."""

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        """Initialize config service.

        Args:
            config_file: Path to config file. Defaults to ~/.specharvest/config.yaml
        """
        if config_file is None:
            config_file = get_config_file()
        self.config_file = Path(config_file)
        self.config_dir = self.config_file.parent

    def load(self) -> SpecHarvestConfig:
        """Load configuration from YAML file.

        Creates default config if file doesn't exist. Unreadable or invalid
        files fall back to defaults without overwriting the file.

        Returns:
            SpecHarvestConfig instance.
        """
        if not self.config_file.exists():
            config = SpecHarvestConfig.create_default()
            self.save(config)
            return config

        try:
            with open(self.config_file, "r") as f:
                data = yaml.safe_load(f) or {}
            return SpecHarvestConfig.from_dict(data)
        except (yaml.YAMLError, IOError, KeyError, TypeError, ValueError) as e:
            logger.warning("Invalid config %s, using defaults: %s", self.config_file, e)
            return SpecHarvestConfig.create_default()

    def save(self, config: SpecHarvestConfig) -> None:
        """Save configuration to YAML file.

        Args:
            config: SpecHarvestConfig to save.
        """
        self.config_dir.mkdir(parents=True, exist_ok=True)

        with open(self.config_file, "w") as f:
            yaml.safe_dump(
                config.to_dict(), f, default_flow_style=False, sort_keys=False
            )

    def update(self, **kwargs: Any) -> SpecHarvestConfig:
        """Update specific config values.

        Supports nested updates using prefixed keys:
        - display_*: Updates display config
        - scoring_*: Updates scoring config
        - export_*: Updates export config
        - workflow_*: Updates workflow config

        Args:
            **kwargs: Config values to update.

        Returns:
            Updated SpecHarvestConfig.

        Raises:
            ValueError: If the updated values fail validation; nothing is saved.

        Examples:
            service.update(display_sources_preview_limit=6)
            service.update(scoring_high_confidence=90)
        """
        data = self.load().to_dict()

        for key, value in kwargs.items():
            updated = False
            for section in data:
                prefix = f"{section}_"
                if key.startswith(prefix):
                    attr_name = key.replace(prefix, "", 1)
                    if attr_name in data[section]:
                        data[section][attr_name] = value
                        updated = True
                    else:
                        logger.warning(
                            "Config key '%s' matched prefix '%s' but attribute "
                            "'%s' not found in section '%s'",
                            key,
                            prefix,
                            attr_name,
                            section,
                        )
                    break
            if not updated:
                logger.warning("Unknown config key ignored: '%s'", key)

        # Rebuilding re-runs section validation before anything is written
        config = SpecHarvestConfig.from_dict(data)
        self.save(config)
        return config

    def confidence_tier(self, confidence: float) -> ConfidenceTier:
        """Tier for a confidence score under the configured thresholds."""
        scoring = self.load().scoring
        return confidence_tier(
            confidence,
            high=scoring.high_confidence,
            medium=scoring.medium_confidence,
            low=scoring.low_confidence,
        )

    def get_export_options(self, **overrides: Any) -> ExportOptions:
        """Export options from config defaults, with per-call overrides."""
        defaults = self.load().export
        values = {
            "format": defaults.format,
            "include_product_data": defaults.include_product_data,
            "include_source_urls": defaults.include_source_urls,
            "include_confidence_scores": defaults.include_confidence_scores,
            "include_summary": defaults.include_summary,
            "filename": defaults.filename,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return ExportOptions(**values)

    def get_analysis_options(self, **overrides: Any) -> AnalysisOptions:
        """Analysis options from workflow defaults, with per-call overrides."""
        workflow = self.load().workflow
        values = {
            "use_ai": workflow.use_ai,
            "model_provider": workflow.model_provider,
            "max_results": workflow.max_results,
            "min_consistent_sources": workflow.min_consistent_sources,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return AnalysisOptions(**values)
