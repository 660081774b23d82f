"""
Smoke test script for a running Service Bot server.

This script imports a small JSON knowledge file, asks a few questions,
exports the knowledge base and finally resets it.
"""

import asyncio
import json
import sys

import httpx

# Configuration
BASE_URL = "http://localhost:12393"
TEST_ENTRIES = [
    {
        "question": "How do I pair the remote control?",
        "answer": "Hold the pair button on the remote for five seconds until the light blinks.",
        "keywords": ["pair", "remote", "control", "bluetooth"],
        "category": "Setup",
    },
    {
        "question": "Where can I find the serial number?",
        "answer": "The serial number is printed on the label under the device.",
        "keywords": ["serial", "number", "label"],
        "category": "Setup",
    },
]


async def run_kb_workflow():
    """Run the workflow: import -> stats -> chat -> export -> reset"""

    async with httpx.AsyncClient(timeout=30.0) as client:
        print(f"🧪 Testing Knowledge Base at {BASE_URL}\n")

        # Step 1: Import structured knowledge
        print("📤 Step 1: Importing test entries...")
        files = {
            "file": (
                "test_kb.json",
                json.dumps(TEST_ENTRIES).encode(),
                "application/json",
            )
        }
        response = await client.post(f"{BASE_URL}/kb/import", files=files)

        if response.status_code != 200:
            print(f"❌ Import failed: {response.status_code} - {response.text}")
            return False

        print(f"✅ {response.json()['message']}")

        # Step 2: Check stats
        print("\n📊 Step 2: Checking KB statistics...")
        response = await client.get(f"{BASE_URL}/kb/stats")
        stats = response.json()["data"]
        print(f"   Total entries: {stats['total']}")
        print(f"   Imported: {stats['imported']}")
        print(f"   Default: {stats['default']}")

        # Step 3: Ask questions
        print("\n🔍 Step 3: Asking questions...")
        questions = [
            "How do I pair my remote?",
            "What is your warranty policy?",
            "Tell me something about dragons",
        ]

        for question in questions:
            print(f"\n   Question: '{question}'")
            response = await client.post(
                f"{BASE_URL}/kb/chat", json={"message": question}
            )

            if response.status_code != 200:
                print(f"   ❌ Chat failed: {response.status_code}")
                continue

            data = response.json()["data"]
            reply = data["reply"]
            preview = reply[:100] + "..." if len(reply) > 100 else reply
            print(f"   ✅ [{data['matched_id'] or 'default'}] {preview}")

        # Step 4: Export
        print("\n\n📋 Step 4: Exporting knowledge base...")
        response = await client.get(f"{BASE_URL}/kb/export")
        print(f"✅ Exported {len(response.json())} entries")

        # Step 5: Reset
        print("\n🗑️  Step 5: Resetting knowledge base...")
        response = await client.post(f"{BASE_URL}/kb/reset")

        if response.status_code == 200:
            print("   ✅ Knowledge base reset")
        else:
            print(f"   ❌ Reset failed: {response.status_code}")

        print("\n✅ All steps completed successfully!")
        return True


if __name__ == "__main__":
    print("=" * 60)
    print("Knowledge Base Smoke Test")
    print("=" * 60)
    print()

    if len(sys.argv) > 1:
        BASE_URL = sys.argv[1]
        print(f"Using server URL from argument: {BASE_URL}\n")

    try:
        asyncio.run(run_kb_workflow())
    except KeyboardInterrupt:
        print("\n\n⚠️  Test interrupted by user")
    except httpx.ConnectError:
        print(
            "\n❌ Could not connect to server. Make sure the server is running at:",
            BASE_URL,
        )
