from tscore.calls import Operation, SymbolicCall
from tscore.datasets import DATASETS, dataset_names
from tsblocks.base_block import TsBlock


class TsDatasetBlock(TsBlock):
    """
    Source block offering every built-in dataset.
    """

    @property
    def identifier(self):
        return "ts_dataset_block"

    @property
    def block_name(self):
        return "Dataset"

    @property
    def category(self):
        return "data"

    @property
    def doc(self):
        return (
            "Loads a built-in time series dataset."
            "\n\nUnivariate datasets come as (time, value); multivariate ones"
            "\ncarry an id column naming each series."
        )

    @property
    def params(self):
        return {
            "dataset": {
                "type": "string",
                "default": "AirPassengers",
                "doc": "Name of the dataset to load",
                "choices": dataset_names()
            }
        }

    @property
    def operations(self):
        return [Operation.LOAD_DATASET]

    def build_call(self, state, probe=None):
        return SymbolicCall.build(Operation.LOAD_DATASET, name=state["dataset"])

    def describe(self, state):
        info = DATASETS[state["dataset"]]
        return f"{info['desc']}. Frequency: {info['freq']}, {info['type']} ({info['series']} series)"
