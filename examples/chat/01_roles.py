#!/usr/bin/env python
"""Model Roles Example.

This example demonstrates:
- Getting the app-wide provider
- Using each model role (chat, title, artifact)
- Inspecting which backend model serves a role

Required environment (see docs/custom-agent-setup.md):
- CUSTOM_AGENT_BASE_URL (default http://localhost:8000/v1)
- CUSTOM_AGENT_API_KEY

Set CUSTOM_AGENT_TEST_MODE=1 to run against the built-in test doubles.
"""

from custom_agent import LANGUAGE_MODEL_IDS, configure_logging, get_provider
from custom_agent.provider import describe_model


def main():
    configure_logging("INFO")
    provider = get_provider()

    print("=" * 60)
    print("Role table")
    print("=" * 60)
    for role in LANGUAGE_MODEL_IDS:
        print(f"  {role:22} {describe_model(provider.language_model(role))}")

    print("\n" + "=" * 60)
    print("Chat")
    print("=" * 60)
    reply = provider.language_model("chat-model").invoke("Say hello in five words.")
    print(reply.content)

    print("\n" + "=" * 60)
    print("Title")
    print("=" * 60)
    title = provider.language_model("title-model").invoke(
        [
            {"role": "system", "content": "Write a short title for this conversation."},
            {"role": "user", "content": "How do I bake sourdough bread at home?"},
        ]
    )
    print(title.content)

    print("\n" + "=" * 60)
    print("Artifact")
    print("=" * 60)
    doc = provider.language_model("artifact-model").invoke("Write a haiku about compilers.")
    print(doc.content)


if __name__ == "__main__":
    main()
