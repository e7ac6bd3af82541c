"""Filtering, sorting, pagination and aggregation over the dataset."""
