import pytest

from app.repos.posts_repo import (
    BY_PUBLICATION_DATE,
    SUMMARY_FIELDS,
    PrismicPostsRepo,
)
from tests.conftest import CMS, FakeContentClient, make_doc, make_response

POSTS_PREDICATE = '[at(document.type, "posts")]'


@pytest.mark.asyncio
async def test_first_page_projects_summary_fields():
    client = FakeContentClient(query_response=make_response([make_doc("a")]))
    repo = PrismicPostsRepo(client)

    response = await repo.first_page(1, ref="preview-ref")

    assert response["results"][0]["uid"] == "a"
    name, predicates, kwargs = client.calls[0]
    assert name == "query"
    assert predicates == [POSTS_PREDICATE]
    assert kwargs["fetch"] == SUMMARY_FIELDS
    assert kwargs["page_size"] == 1
    assert kwargs["ref"] == "preview-ref"


@pytest.mark.asyncio
async def test_next_page_fetches_cursor_url():
    cursor = f"{CMS}/documents/search?page=2"
    client = FakeContentClient(responses={cursor: make_response([make_doc("b")])})
    repo = PrismicPostsRepo(client)

    response = await repo.next_page(cursor)

    assert response["results"][0]["uid"] == "b"
    assert client.calls == [("fetch_url", cursor)]


@pytest.mark.asyncio
async def test_get_post_looks_up_posts_by_uid():
    doc = make_doc("hello")
    client = FakeContentClient(docs_by_uid={"hello": doc})
    repo = PrismicPostsRepo(client)

    assert await repo.get_post("hello", ref="r") == doc
    assert await repo.get_post("missing") is None
    assert client.calls[0] == ("get_by_uid", "posts", "hello", "r")


@pytest.mark.asyncio
async def test_all_posts_by_date_follows_every_page():
    page2 = f"{CMS}/documents/search?page=2"
    page3 = f"{CMS}/documents/search?page=3"
    client = FakeContentClient(
        query_response=make_response([make_doc("a")], next_page=page2),
        responses={
            page2: make_response([make_doc("b")], next_page=page3),
            page3: make_response([make_doc("c")]),
        },
    )
    repo = PrismicPostsRepo(client)

    docs = await repo.all_posts_by_date()

    assert [d["uid"] for d in docs] == ["a", "b", "c"]
    _, _, kwargs = client.calls[0]
    assert kwargs["orderings"] == BY_PUBLICATION_DATE
    assert [call[0] for call in client.calls] == ["query", "fetch_url", "fetch_url"]


@pytest.mark.asyncio
async def test_post_uids_limits_and_skips_documents_without_uid():
    client = FakeContentClient(
        query_response=make_response([make_doc("a"), make_doc(None), make_doc("b")])
    )
    repo = PrismicPostsRepo(client)

    assert await repo.post_uids(2) == ["a", "b"]
    assert client.calls[0][2]["page_size"] == 2
    assert await repo.post_uids(0) == []


@pytest.mark.asyncio
async def test_get_document_looks_up_by_id():
    doc = make_doc("hello", doc_id="XYZ")
    client = FakeContentClient(docs_by_uid={"hello": doc})
    repo = PrismicPostsRepo(client)

    assert await repo.get_document("XYZ", ref="r") == doc
    assert client.calls[0] == ("get_by_id", "XYZ", "r")
