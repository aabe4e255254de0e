"""finsight command line interface."""
