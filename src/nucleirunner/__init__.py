"""nuclei-runner: provision and run the nuclei scanner from build pipelines."""

__version__ = "0.3.0"
