from datetime import datetime

import anyio
import pytest

from postboard.core import exceptions
from postboard.core.bases.base_repository import RepositoryError
from postboard.apps.posts.repositories.post_repository import PostSearch
from postboard.apps.posts.schemas.post import PostCreate

pytestmark = pytest.mark.anyio


def payload(title="Hello World", content="First post on the board", author="alice"):
    return PostCreate(title=title, content=content, author=author)


async def test_create_trims_and_starts_at_zero_views(service):
    post = await service.create(payload(title="  Hello World  ", author=" alice "))

    assert post.id is not None
    assert post.title == "Hello World"
    assert post.author == "alice"
    assert post.view_count == 0
    assert post.created_at == post.updated_at


@pytest.mark.parametrize(
    "field, value",
    [
        ("title", "   "),
        ("content", ""),
        ("author", "\t\n"),
        ("title", "x" * 201),
        ("content", "x" * 10001),
        ("author", "x" * 101),
    ],
)
async def test_create_rejects_blank_or_too_long_fields(service, field, value):
    data = payload().model_dump()
    data[field] = value

    with pytest.raises(exceptions.ValidationException) as exc_info:
        await service.create(data)

    assert exc_info.value.status_code == 400
    assert exc_info.value.error_details[0].field == field
    assert (await service.get_list()).total_elements == 0


async def test_length_limits_apply_after_trimming(service):
    post = await service.create(payload(title="  " + "t" * 200 + "  ", author="a" * 100))
    assert len(post.title) == 200


async def test_get_by_id_counts_every_read(service):
    post = await service.create(payload())

    first = await service.get_by_id(post.id)
    second = await service.get_by_id(post.id)

    assert first.view_count == 1
    assert second.view_count == 2
    assert second.created_at == post.created_at


async def test_concurrent_reads_each_count_once(service):
    post = await service.create(payload())
    seen = []

    async def read():
        seen.append((await service.get_by_id(post.id)).view_count)

    async with anyio.create_task_group() as tg:
        for _ in range(20):
            tg.start_soon(read)

    assert sorted(seen) == list(range(1, 21))
    assert (await service.get_by_id(post.id)).view_count == 21


@pytest.mark.parametrize("bad_id", [0, -1, True, 2**63, 10**20])
async def test_invalid_ids_are_rejected_before_storage(service, bad_id):
    for operation in (service.get_by_id, service.delete):
        with pytest.raises(exceptions.ValidationException):
            await operation(bad_id)
    with pytest.raises(exceptions.ValidationException):
        await service.update(bad_id, payload())


async def test_largest_storable_id_is_just_missing(service):
    with pytest.raises(exceptions.NotFoundException):
        await service.get_by_id(2**63 - 1)


async def test_missing_post_is_not_found(service):
    with pytest.raises(exceptions.NotFoundException):
        await service.get_by_id(999)
    with pytest.raises(exceptions.NotFoundException):
        await service.update(999, payload())
    with pytest.raises(exceptions.NotFoundException):
        await service.delete(999)


async def test_update_replaces_text_and_keeps_counters(service, clock):
    post = await service.create(payload())
    await service.get_by_id(post.id)
    read = await service.get_by_id(post.id)

    updated = await service.update(
        post.id, {"title": " New title ", "content": "New content", "author": "bob"}
    )

    assert updated.id == post.id
    assert (updated.title, updated.content, updated.author) == ("New title", "New content", "bob")
    assert updated.view_count == 2
    assert updated.created_at == post.created_at
    assert updated.updated_at > read.updated_at


async def test_update_validates_before_lookup(service):
    with pytest.raises(exceptions.ValidationException):
        await service.update(999, {"title": "", "content": "c", "author": "a"})


async def test_delete_is_permanent(service):
    post = await service.create(payload())

    await service.delete(post.id)

    with pytest.raises(exceptions.NotFoundException):
        await service.get_by_id(post.id)
    with pytest.raises(exceptions.NotFoundException):
        await service.delete(post.id)


@pytest.mark.parametrize("page, size", [(-1, 5), (0, 0), (0, 6), (0, -3)])
async def test_page_bounds_are_enforced_everywhere(service, page, size):
    calls = [
        service.get_list(page, size),
        service.get_latest(page, size),
        service.get_popular(page, size),
        service.search_by_title("x", page, size),
        service.search_by_content("x", page, size),
        service.search_by_author("x", page, size),
        service.search_by_keyword("x", page, size),
        service.get_created_between(datetime(2024, 1, 1), datetime(2024, 1, 2), page, size),
    ]
    for call in calls:
        with pytest.raises(exceptions.ValidationException):
            await call



async def test_page_offset_beyond_storage_range_is_rejected(service):
    with pytest.raises(exceptions.ValidationException) as exc_info:
        await service.get_latest(2**62, 5)

    assert exc_info.value.error_details[0].field == "page"
    assert (await service.get_latest(10**6, 5)).items == []


@pytest.mark.parametrize("term", [None, "", "   "])
async def test_blank_search_terms_are_rejected(service, term):
    with pytest.raises(exceptions.ValidationException):
        await service.search_by_keyword(term)


@pytest.mark.parametrize("term", ["hello", "WORLD", "lo wo", "  Hello  "])
async def test_title_search_is_case_insensitive_substring(service, term):
    await service.create(payload(title="Hello World"))
    await service.create(payload(title="Something else"))

    page = await service.search_by_title(term)

    assert page.total_elements == 1
    assert page.items[0].title == "Hello World"


async def test_field_searches_only_look_at_their_field(service):
    await service.create(payload(title="Python tips", content="Use generators", author="carol"))

    assert (await service.search_by_title("generators")).total_elements == 0
    assert (await service.search_by_content("GENERATORS")).total_elements == 1
    assert (await service.search_by_author("car")).total_elements == 1
    assert (await service.search_by_author("python")).total_elements == 0


async def test_keyword_search_covers_all_fields(service):
    await service.create(payload(title="Alpha", content="first body", author="zed"))
    await service.create(payload(title="Beta", content="mentions alpha", author="yan"))
    await service.create(payload(title="Gamma", content="third body", author="alphonse"))

    assert (await service.search_by_keyword("alph")).total_elements == 3
    assert (await service.search_by_keyword("zed")).total_elements == 1

    empty = await service.search_by_keyword("nothing-matches")
    assert empty.items == []
    assert empty.total_elements == 0
    assert empty.total_pages == 0


async def test_search_treats_wildcards_literally(service):
    await service.create(payload(title="100% done"))
    await service.create(payload(title="1000 done"))

    page = await service.search_by_title("100%")

    assert [p.title for p in page.items] == ["100% done"]


async def test_two_field_keyword_ignores_author(repository, service):
    await service.create(payload(title="Intro", content="body", author="keyword-author"))
    await service.create(payload(title="keyword in title", content="body", author="x"))

    page = await repository.search(PostSearch.TITLE_OR_CONTENT, "keyword", 0, 5)

    assert [p.title for p in page.items] == ["keyword in title"]


async def test_latest_orders_newest_first_and_pages(service, clock):
    for i in range(7):
        await service.create(payload(title=f"post {i}"))

    first = await service.get_latest(0, 5)
    second = await service.get_latest(1, 5)

    assert [p.title for p in first.items] == [f"post {i}" for i in (6, 5, 4, 3, 2)]
    assert [p.title for p in second.items] == ["post 1", "post 0"]
    assert (first.total_elements, first.total_pages, first.page, first.size) == (7, 2, 0, 5)
    assert (await service.get_latest(5, 5)).items == []


async def test_search_results_are_newest_first(service, clock):
    await service.create(payload(title="news one"))
    await service.create(payload(title="unrelated"))
    await service.create(payload(title="news two"))

    page = await service.search_by_title("news")

    assert [p.title for p in page.items] == ["news two", "news one"]


async def test_popular_orders_by_view_count(service):
    posts = [await service.create(payload(title=f"p{i}")) for i in range(3)]
    await service.get_by_id(posts[1].id)
    await service.get_by_id(posts[1].id)
    await service.get_by_id(posts[2].id)

    page = await service.get_popular(0, 5)

    assert [(p.title, p.view_count) for p in page.items] == [("p1", 2), ("p2", 1), ("p0", 0)]


async def test_period_is_inclusive_and_newest_first(service, clock):
    created = [await service.create(payload(title=f"p{i}")) for i in range(4)]

    page = await service.get_created_between(created[1].created_at, created[2].created_at)

    assert [p.title for p in page.items] == ["p2", "p1"]


async def test_inverted_period_is_rejected(service):
    with pytest.raises(exceptions.ValidationException):
        await service.get_created_between(datetime(2024, 2, 1), datetime(2024, 1, 1))


async def test_repository_errors_become_service_errors(service, monkeypatch):
    async def broken(*args, **kwargs):
        raise RepositoryError("Database error during list: disk I/O error")

    monkeypatch.setattr(service.repository, "list_latest", broken)

    with pytest.raises(exceptions.ServiceException) as exc_info:
        await service.get_latest()

    assert exc_info.value.status_code == 500
    assert "disk" not in exc_info.value.detail
