"""Shared fixtures for the comparison engine and backend tests."""

import os

import pytest

os.environ.setdefault("PIPELINE_LOG_TO_FILE", "false")


@pytest.fixture
def raw_catalog():
    """Listings in the shapes the pricing service delivers, deliberately unsorted."""
    return [
        {"id": "3", "name": "Blue Bottle Rum 700ml", "price": 80.0, "imageUrl": "https://img/3.jpg"},
        {"id": "1", "name": "Aged Blue Rum 700ml Deluxe", "price": 120.0},
        {"_id": "7", "_source": {"name": "Green Bottle Gin 1L", "price": 35.5, "imageUrl": None}},
        {"id": "5", "name": "Blue Bottle Rum Gift Set 700ml", "price": 100.0},
    ]


@pytest.fixture
def fruit_catalog():
    return [
        {"id": "a", "name": "apple", "price": 1.0},
        {"id": "b", "name": "banana", "price": 2.0},
        {"id": "c", "name": "cherry", "price": 3.0},
    ]
