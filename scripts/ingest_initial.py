"""Script to ingest sample documents through the document API."""

import argparse
import asyncio
from typing import Dict, List

import httpx

SAMPLE_DOCUMENTS: List[Dict] = [
    {
        "content": "Retrieval-Augmented Generation (RAG) combines the power of information retrieval with language models. "
        "It allows systems to access external knowledge bases and provide accurate, up-to-date answers.",
        "source": "samples/rag.md",
        "metadata": {"title": "Introduction to RAG Systems"},
    },
    {
        "content": "Vector databases store high-dimensional vectors and enable fast similarity search. "
        "They are essential for RAG systems as they allow efficient retrieval of semantically similar documents.",
        "source": "samples/vector-db.md",
        "metadata": {"title": "Vector Databases for Semantic Search"},
    },
    {
        "content": "Embeddings are fixed-length numeric vectors representing text. "
        "Texts with similar meaning map to nearby vectors.",
        "source": "samples/embeddings.md",
    },
]


async def ingest_sample_documents(
    base_url: str, api_key: str, collection_id: str
) -> None:
    """Post the sample documents as one batch."""
    async with httpx.AsyncClient(base_url=base_url, timeout=60.0) as client:
        response = await client.post(
            "/documents",
            params={"collection_id": collection_id},
            headers={"X-API-Key": api_key},
            json=SAMPLE_DOCUMENTS,
        )
        if response.status_code != 200:
            print(f"Ingestion failed ({response.status_code}): {response.json()['error']}")
            return

        for document in response.json():
            print(f"Inserted document {document['id']}: {document['source']}")

    print(f"\nIngested {len(SAMPLE_DOCUMENTS)} documents into {collection_id}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("api_key")
    parser.add_argument("--collection-id", default="samples")
    parser.add_argument("--base-url", default="http://localhost:8000")
    args = parser.parse_args()

    asyncio.run(ingest_sample_documents(args.base_url, args.api_key, args.collection_id))
