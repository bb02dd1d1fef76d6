"""Script classification, dispatch, reinsertion and the pipeline driver."""
