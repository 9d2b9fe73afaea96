"""Test that repository implementations conform to their protocols."""

from unittest.mock import MagicMock

import pytest

from ebookstore.domain.interfaces import BookRepository, ProgressRepository, UserRepository
from ebookstore.infrastructure import (
    DynamoDBBookRepository,
    DynamoDBProgressRepository,
    DynamoDBUserRepository,
    LocalBookRepository,
    LocalProgressRepository,
    LocalUserRepository,
)


@pytest.mark.parametrize(
    "repository,protocol",
    [
        (LocalUserRepository(), UserRepository),
        (DynamoDBUserRepository(MagicMock(), "users"), UserRepository),
        (LocalBookRepository(), BookRepository),
        (DynamoDBBookRepository(MagicMock(), "books"), BookRepository),
        (LocalProgressRepository(), ProgressRepository),
        (DynamoDBProgressRepository(MagicMock(), "progress"), ProgressRepository),
    ],
)
def test_repository_implements_protocol(repository, protocol):
    """Local and DynamoDB repositories are interchangeable through the protocol."""
    assert isinstance(repository, protocol)
