"""
OpenProject Users Example - Declare OpenProject accounts in Python.

Run from this directory:
    export OP_APP_URL=https://openproject.example.com
    export OP_APIKEY=<your api key>
    openproject-provider plan
    openproject-provider apply

Every field is creation-only: editing one and re-running apply deletes the
user and creates it again. Users removed in OpenProject by hand are noticed
on the next apply and created again.
"""

import os

from openproject_provider.resources import OpenProjectUserResource

# A new account, created through the API
jdoe = OpenProjectUserResource(
    username="jdoe",
    email="jdoe@example.com",
    firstname="John",
    lastname="Doe",
    password=os.environ.get("JDOE_PASSWORD", "change-me-please"),  # pragma: allowlist secret
)

# A second account with an explicit Pulumi resource name
reviewer = OpenProjectUserResource(
    name="qa-reviewer",
    username="qa.reviewer",
    email="qa@example.com",
    firstname="Quality",
    lastname="Reviewer",
    password=os.environ.get("QA_PASSWORD", "change-me-too"),  # pragma: allowlist secret
)

# Adopt a user that already exists in OpenProject (id 4) instead of creating it
# existing = OpenProjectUserResource(
#     username="existing.user",
#     email="existing@example.com",
#     firstname="Existing",
#     lastname="User",
#     password="not-sent-for-imports",
#     import_id="4",
# )
