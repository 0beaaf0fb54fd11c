import os
import importlib
import inspect
import logging

from tsblocks.base_block import TsBlock

logger = logging.getLogger(__name__)

SKIPPED_MODULES = ('base_block.py', 'param_templates.py')


def load_blocks():
    """
    Scans the 'tsblocks' directory, imports all block modules, and returns a list of all block classes.
    """
    block_classes = []
    blocks_dir = os.path.join(os.path.dirname(__file__), '..', 'tsblocks')

    for filename in sorted(os.listdir(blocks_dir)):
        if filename.endswith('.py') and not filename.startswith('__') and filename not in SKIPPED_MODULES:
            module_name = f"tsblocks.{filename[:-3]}"
            try:
                module = importlib.import_module(module_name)
            except ImportError as e:
                logger.error(f"Error loading block from {filename}: {e}")
                continue
            for name, obj in inspect.getmembers(module, inspect.isclass):
                if issubclass(obj, TsBlock) and obj is not TsBlock and obj.__module__ == module_name:
                    block_classes.append(obj)

    return block_classes
