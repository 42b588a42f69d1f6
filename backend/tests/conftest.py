"""
Shared fixtures: a valid model payload, fake OpenAI / S3 clients, an
in-memory key-value store. No network, no Mongo.
"""

import copy
import json
from types import SimpleNamespace

import pytest
from botocore.exceptions import ClientError

from recipesmith.db.repository import RecipeRepository
from recipesmith.db.store import MemoryKeyValueStore
from recipesmith.models.recipe import Recipe
from recipesmith.services.llm_openai import GenerationClient
from recipesmith.services.storage_s3 import S3ObjectStore


VALID_PAYLOAD = {
    "cuisine": "Italian",
    "title": "Creamy Garlic Chicken Pasta",
    "description": "Penne tossed in a light garlic cream sauce with seared chicken.",
    "imgdesc": "A white bowl of penne with golden chicken slices and parsley, overhead shot",
    "servings": "4",
    "serving_size": "1 bowl",
    "prep": "15 minutes",
    "cook": "20 minutes",
    "total": "35 minutes",
    "cal": "520",
    "macros": {
        "protein": "32g",
        "carbohydrates": "55g",
        "fat": "16g",
        "fiber": "4g",
        "sugar": "5g",
        "saturated_fat": "6g",
        "vitamins": [{"name": "Vitamin C", "amount": "9", "unit": "mg"}],
        "minerals": [{"name": "Iron", "amount": "3.6", "unit": "mg"}],
    },
    "ingredients": [
        "300g penne pasta",
        "2 chicken breasts, sliced",
        "4 cloves garlic, minced",
        "1 cup light cream",
        "1/2 cup grated parmesan cheese",
    ],
    "instructions": [
        "Cook the pasta until al dente.",
        "Sear the chicken until golden.",
        "Simmer garlic and cream, then toss everything together.",
    ],
    "meal": "Dinner",
    "equipment": ["Large pot", "Skillet"],
    "diet": ["High-Protein"],
    "ingredient_types": {
        "2 chicken breasts, sliced": ["protein"],
        "1/2 cup grated parmesan cheese": ["dairy", "sodium"],
    },
}


@pytest.fixture
def payload():
    return copy.deepcopy(VALID_PAYLOAD)


@pytest.fixture
def recipe(payload):
    return Recipe.model_validate(payload)


def chat_response(content):
    message = SimpleNamespace(content=content)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeCompletions:
    def __init__(self, responses):
        # each item: str content, a response object, or an exception to raise
        self.responses = list(responses)
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        if isinstance(item, str):
            return chat_response(item)
        return item


class FakeOpenAI:
    def __init__(self, *responses):
        self.chat = SimpleNamespace(completions=FakeCompletions(responses))

    @property
    def calls(self):
        return self.chat.completions.calls


@pytest.fixture
def fake_openai():
    def make(*responses):
        return FakeOpenAI(*responses)
    return make


@pytest.fixture
def llm_for(fake_openai):
    """GenerationClient answering with the given contents, in order."""
    def make(*responses):
        return GenerationClient(client=fake_openai(*responses))
    return make


@pytest.fixture
def valid_json():
    return json.dumps(VALID_PAYLOAD)


class FakePaginator:
    def __init__(self, pages):
        self.pages = pages

    def paginate(self, **kwargs):
        return iter(self.pages)


class FakeS3:
    """Just enough of the boto3 S3 client for S3ObjectStore."""

    def __init__(self, fail_on=(), page_size=1000):
        self.objects = {}
        self.fail_on = set(fail_on)
        self.page_size = page_size
        self.delete_batches = []

    def _maybe_fail(self, op):
        if op in self.fail_on:
            raise ClientError({"Error": {"Code": "500", "Message": "boom"}}, op)

    def put_object(self, Bucket, Key, Body, ContentType):
        self._maybe_fail("PutObject")
        self.objects[Key] = (Body, ContentType)
        return {}

    def delete_object(self, Bucket, Key):
        self._maybe_fail("DeleteObject")
        self.objects.pop(Key, None)
        return {}

    def get_paginator(self, name):
        keys = sorted(self.objects)
        pages = [
            {"Contents": [{"Key": k} for k in keys[i:i + self.page_size]]}
            for i in range(0, len(keys), self.page_size)
        ] or [{}]
        return FakePaginator(pages)

    def delete_objects(self, Bucket, Delete):
        self._maybe_fail("DeleteObjects")
        batch = [o["Key"] for o in Delete["Objects"]]
        self.delete_batches.append(batch)
        for k in batch:
            self.objects.pop(k, None)
        return {}


@pytest.fixture
def fake_s3():
    return FakeS3()


@pytest.fixture
def object_store(fake_s3):
    return S3ObjectStore(bucket="test-bucket", region="us-west-2", client=fake_s3)


@pytest.fixture
def kv():
    return MemoryKeyValueStore()


@pytest.fixture
def repo(kv, object_store):
    return RecipeRepository(kv, "user-1", images=object_store)


@pytest.fixture
def make_s3():
    """FakeS3 factory, e.g. make_s3(fail_on={"DeleteObject"}, page_size=2)."""
    def make(**kw):
        return FakeS3(**kw)
    return make
