"""maven3builder - run Maven 3 builds through the classworlds launcher."""

__version__ = "0.1.0"
