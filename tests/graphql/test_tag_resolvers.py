"""
Unit tests for tag query and mutation resolvers
"""

import asyncio

import pytest
import strawberry

from postgraph.graphql.ids import POST_TYPE, TAG_TYPE, decode_global_id, encode_global_id
from postgraph.graphql.resolvers.post import resolve_post_by_id
from postgraph.graphql.resolvers.tag import add_tag, delete_tag, resolve_tag_posts, resolve_tags
from postgraph.graphql.types.inputs import AddTagInput
from postgraph.graphql.types.payloads import AddTagSuccess, ApiError, DeleteTagSuccess
from postgraph.graphql.types.tag import Tag


def gid(type_name: str, entity_id: int) -> strawberry.ID:
    return strawberry.ID(encode_global_id(type_name, entity_id))


class TestAddTag:
    """Tests for add_tag mutation."""

    @pytest.mark.asyncio
    async def test_add_tag(self, mock_info):
        result = await add_tag(mock_info, AddTagInput(name="python"))

        assert isinstance(result, AddTagSuccess)
        assert result.tag.name == "python"
        assert decode_global_id(result.tag.id)[0] == TAG_TYPE
        assert await resolve_tag_posts(result.tag, mock_info) == []

    @pytest.mark.asyncio
    async def test_duplicate_names_are_allowed(self, mock_info):
        first = await add_tag(mock_info, AddTagInput(name="same"))
        second = await add_tag(mock_info, AddTagInput(name="same"))

        assert isinstance(second, AddTagSuccess)
        assert first.tag.id != second.tag.id


class TestDeleteTag:
    """Tests for delete_tag mutation."""

    @pytest.mark.asyncio
    async def test_delete_removes_tag_from_posts(
        self, mock_info, graphql_context, make_tag, make_post
    ):
        doomed, kept = await make_tag("doomed"), await make_tag("kept")
        post = await make_post("P", tags=(doomed, kept))

        result = await delete_tag(mock_info, gid(TAG_TYPE, doomed.id))

        assert isinstance(result, DeleteTagSuccess)
        assert result.tag.name == "doomed"
        assert [p.id for p in result.tag.record.posts] == [post.id]

        # Fresh request scope so nothing is served from the previous cache
        graphql_context["loaders"].post_by_id.clear_all()
        reloaded = await resolve_post_by_id(mock_info, gid(POST_TYPE, post.id))
        assert reloaded.record.tag_ids == {kept.id}

    @pytest.mark.asyncio
    async def test_delete_twice(self, mock_info, make_tag):
        tag = await make_tag("once")

        first = await delete_tag(mock_info, gid(TAG_TYPE, tag.id))
        second = await delete_tag(mock_info, gid(TAG_TYPE, tag.id))

        assert isinstance(first, DeleteTagSuccess)
        assert isinstance(second, ApiError)
        assert second.code == "TAG_NOT_FOUND"
        assert second.message == "Tag not found."

    @pytest.mark.asyncio
    async def test_post_id_is_not_a_tag(self, mock_info, make_tag, make_post):
        tag = await make_tag("t")
        post = await make_post("P", tags=(tag,))

        result = await delete_tag(mock_info, gid(POST_TYPE, post.id))

        assert isinstance(result, ApiError)
        assert result.code == "TAG_NOT_FOUND"


class TestTagQueries:
    """Tests for tag query resolvers."""

    @pytest.mark.asyncio
    async def test_tags_include_their_posts(
        self, mock_info, unit_of_work_factory, make_tag, make_post
    ):
        red, blue, empty = await make_tag("red"), await make_tag("blue"), await make_tag("empty")
        first = await make_post("First", tags=(red,))
        second = await make_post("Second", tags=(red, blue))

        page = await resolve_tags(mock_info)
        calls = unit_of_work_factory.calls
        posts_by_name = {
            tag.name: [decode_global_id(p.id)[1] for p in await resolve_tag_posts(tag, mock_info)]
            for tag in page.nodes
        }

        assert posts_by_name == {
            "red": [first.id, second.id],
            "blue": [second.id],
            "empty": [],
        }
        assert page.total_count == 3
        # Posts came with the page; resolving them needed no further round trips
        assert unit_of_work_factory.calls == calls
        assert empty.id == decode_global_id(page.nodes[-1].id)[1]

    @pytest.mark.asyncio
    async def test_tag_posts_batched_when_not_loaded(
        self, mock_info, unit_of_work_factory, make_tag, make_post
    ):
        one, two = await make_tag("one"), await make_tag("two")
        post = await make_post("P", tags=(one, two))
        tags = [Tag.from_record(tag.model_copy(update={"posts": None})) for tag in (one, two)]
        calls = unit_of_work_factory.calls

        results = await asyncio.gather(*(resolve_tag_posts(tag, mock_info) for tag in tags))

        assert [[p.title for p in posts] for posts in results] == [["P"], ["P"]]
        assert unit_of_work_factory.calls == calls + 1
        assert decode_global_id(results[0][0].id)[1] == post.id
