"""
Built-in example datasets.
"""

from tscore.datasets.catalog import DATASETS, dataset_label, dataset_names, load_dataset

__all__ = ['DATASETS', 'dataset_label', 'dataset_names', 'load_dataset']
