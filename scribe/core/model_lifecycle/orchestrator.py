# File: scribe/core/model_lifecycle/orchestrator.py

import gc
import logging
from threading import Lock
from typing import Callable, Optional, Tuple

import torch

from .types import ModelType

logger = logging.getLogger(__name__)

class ModelOrchestrator:
    """
    Singleton Resource Manager.
    Keeps exactly one speech model resident. Asking for a different
    (type, variant) pair evicts the current one first.
    """
    _instance = None
    _lock = Lock()

    def __new__(cls):
        with cls._lock:
            if cls._instance is None:
                cls._instance = super(ModelOrchestrator, cls).__new__(cls)
                cls._instance._current_key = None
                cls._instance._loaded_model = None
        return cls._instance

    def request_model(self, model_type: ModelType, variant: str, loader_func: Callable):
        """
        Returns the resident model for (model_type, variant), loading it if needed.

        Args:
            model_type: The enum identifier for the model family.
            variant: Size/checkpoint name, e.g. 'base' or 'large-v3'.
            loader_func: Called with no arguments, only when a load is required.
        """
        key = (model_type, variant)
        with self._lock:
            if self._current_key == key and self._loaded_model is not None:
                return self._loaded_model

            if self._loaded_model is not None:
                self._unload()

            logger.info(f"Orchestrator: Loading {model_type.value}/{variant}...")
            try:
                self._loaded_model = loader_func()
                self._current_key = key
                return self._loaded_model
            except Exception as e:
                logger.error(f"Failed to load {model_type.value}/{variant}: {e}")
                raise

    def _unload(self):
        """Drops the resident model and releases accelerator memory."""
        if self._current_key:
            logger.info(f"Orchestrator: Unloading {self._current_key[0].value}/{self._current_key[1]}...")

        self._loaded_model = None
        self._current_key = None

        gc.collect()
        if torch.cuda.is_available():
            torch.cuda.empty_cache()

    def get_current_model(self) -> Optional[Tuple[ModelType, str]]:
        """Helper for testing state."""
        return self._current_key
