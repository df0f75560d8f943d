"""
Integration tests executing operations against the GraphQL schema
"""

import pytest

from postgraph.graphql.ids import POST_TYPE, TAG_TYPE, encode_global_id
from postgraph.graphql.schema import schema, validate_schema

ADD_POST = """
    mutation AddPost($input: AddPostInput!) {
        addPost(input: $input) {
            __typename
            ... on AddPostSuccess {
                post { id title content created modified tags { id name } }
            }
            ... on ApiError { code message }
        }
    }
"""

UPDATE_POST = """
    mutation UpdatePost($input: UpdatePostInput!) {
        updatePost(input: $input) {
            __typename
            ... on UpdatePostSuccess { post { id title content modified tags { name } } }
            ... on ApiError { code message }
        }
    }
"""

ADD_TAG = """
    mutation AddTag($name: String!) {
        addTag(input: { name: $name }) {
            ... on AddTagSuccess { tag { id name } }
        }
    }
"""

DELETE_TAG = """
    mutation DeleteTag($id: ID!) {
        deleteTag(id: $id) {
            __typename
            ... on DeleteTagSuccess { tag { name posts { title } } }
            ... on ApiError { code message }
        }
    }
"""


async def run(query, context, **variables):
    result = await schema.execute(query, variable_values=variables, context_value=context)
    assert result.errors is None, result.errors
    return result.data


def test_schema_is_valid():
    validate_schema()


class TestMutations:
    """Mutations end to end."""

    @pytest.mark.asyncio
    async def test_add_post_with_tags(self, graphql_context):
        tag = (await run(ADD_TAG, graphql_context, name="news"))["addTag"]["tag"]

        data = await run(
            ADD_POST,
            graphql_context,
            input={"title": "A", "content": "x", "tags": [tag["id"]]},
        )

        payload = data["addPost"]
        assert payload["__typename"] == "AddPostSuccess"
        assert payload["post"]["title"] == "A"
        assert payload["post"]["modified"] is None
        assert payload["post"]["tags"] == [tag]

    @pytest.mark.asyncio
    async def test_add_post_duplicate_title(self, graphql_context):
        await run(ADD_POST, graphql_context, input={"title": "A", "content": "x"})

        data = await run(ADD_POST, graphql_context, input={"title": "A", "content": "y"})

        assert data["addPost"] == {
            "__typename": "ApiError",
            "code": "POST_WITH_TITLE_EXISTS",
            "message": "A post with that title already exists.",
        }

    @pytest.mark.asyncio
    async def test_update_post_not_found(self, graphql_context):
        data = await run(
            UPDATE_POST,
            graphql_context,
            input={"id": encode_global_id(POST_TYPE, 999), "title": "Z"},
        )

        assert data["updatePost"]["code"] == "POST_NOT_FOUND"
        assert data["updatePost"]["message"] == "Post not found."

    @pytest.mark.asyncio
    async def test_update_post_keeps_omitted_fields(self, graphql_context, make_tag, make_post):
        tag = await make_tag("t")
        post = await make_post("Title", content="Body", tags=(tag,))

        data = await run(
            UPDATE_POST,
            graphql_context,
            input={"id": encode_global_id(POST_TYPE, post.id), "title": ""},
        )

        updated = data["updatePost"]["post"]
        assert updated["title"] == "Title"
        assert updated["content"] == "Body"
        assert updated["modified"] is not None
        assert updated["tags"] == [{"name": "t"}]

    @pytest.mark.asyncio
    async def test_delete_tag_payload(self, graphql_context, make_tag, make_post):
        tag = await make_tag("doomed")
        await make_post("Carrier", tags=(tag,))
        tag_id = encode_global_id(TAG_TYPE, tag.id)

        first = await run(DELETE_TAG, graphql_context, id=tag_id)
        second = await run(DELETE_TAG, graphql_context, id=tag_id)

        assert first["deleteTag"] == {
            "__typename": "DeleteTagSuccess",
            "tag": {"name": "doomed", "posts": [{"title": "Carrier"}]},
        }
        assert second["deleteTag"]["code"] == "TAG_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_malformed_id_is_a_graphql_error(self, graphql_context):
        result = await schema.execute(
            DELETE_TAG, variable_values={"id": "not-base64!"}, context_value=graphql_context
        )

        assert result.errors
        assert result.data is None or result.data["deleteTag"] is None


class TestQueries:
    """Queries end to end."""

    @pytest.mark.asyncio
    async def test_aliased_lookups_share_one_round_trip(
        self, graphql_context, unit_of_work_factory, make_post
    ):
        posts = [await make_post(f"Post {i}") for i in range(3)]
        calls = unit_of_work_factory.calls
        query = "query { %s }" % " ".join(
            f'p{i}: postById(id: "{encode_global_id(POST_TYPE, post.id)}") {{ title }}'
            for i, post in enumerate(posts)
        )

        data = await run(query, graphql_context)

        assert [data[f"p{i}"]["title"] for i in range(3)] == ["Post 0", "Post 1", "Post 2"]
        assert unit_of_work_factory.calls == calls + 1

    @pytest.mark.asyncio
    async def test_node_lookup(self, graphql_context, make_tag, make_post):
        tag = await make_tag("t")
        post = await make_post("P", tags=(tag,))
        query = """
            query Node($id: ID!) {
                node(id: $id) {
                    __typename
                    id
                    ... on Post { title }
                    ... on Tag { name }
                }
            }
        """

        post_node = await run(query, graphql_context, id=encode_global_id(POST_TYPE, post.id))
        tag_node = await run(query, graphql_context, id=encode_global_id(TAG_TYPE, tag.id))
        missing = await run(query, graphql_context, id=encode_global_id(TAG_TYPE, 999))

        assert post_node["node"]["__typename"] == "Post"
        assert post_node["node"]["title"] == "P"
        assert tag_node["node"] == {
            "__typename": "Tag",
            "id": encode_global_id(TAG_TYPE, tag.id),
            "name": "t",
        }
        assert missing["node"] is None

    @pytest.mark.asyncio
    async def test_posts_connection(self, graphql_context, make_tag, make_post):
        tag = await make_tag("shared")
        for i in range(3):
            await make_post(f"Post {i}", tags=(tag,))
        query = """
            query Posts($first: Int, $after: String) {
                posts(first: $first, after: $after) {
                    totalCount
                    pageInfo { hasNextPage hasPreviousPage endCursor }
                    edges { cursor node { title tags { name posts { title } } } }
                }
            }
        """

        first = (await run(query, graphql_context, first=2))["posts"]
        rest = (
            await run(query, graphql_context, first=2, after=first["pageInfo"]["endCursor"])
        )["posts"]

        assert first["totalCount"] == 3
        assert first["pageInfo"]["hasNextPage"] is True
        assert first["pageInfo"]["hasPreviousPage"] is False
        assert [edge["node"]["title"] for edge in first["edges"]] == ["Post 0", "Post 1"]
        assert first["edges"][0]["node"]["tags"][0]["posts"] == [
            {"title": "Post 0"},
            {"title": "Post 1"},
            {"title": "Post 2"},
        ]
        assert [edge["node"]["title"] for edge in rest["edges"]] == ["Post 2"]
        assert rest["pageInfo"]["hasNextPage"] is False
        assert rest["pageInfo"]["hasPreviousPage"] is True

    @pytest.mark.asyncio
    async def test_tags_connection(self, graphql_context, make_tag, make_post):
        tag = await make_tag("t")
        await make_tag("unused")
        await make_post("P", tags=(tag,))

        data = await run(
            "query { tags { totalCount nodes { name posts { title } } } }", graphql_context
        )

        assert data["tags"] == {
            "totalCount": 2,
            "nodes": [
                {"name": "t", "posts": [{"title": "P"}]},
                {"name": "unused", "posts": []},
            ],
        }

    @pytest.mark.asyncio
    async def test_invalid_cursor_is_a_graphql_error(self, graphql_context):
        result = await schema.execute(
            'query { posts(after: "bm9jb2xvbg==") { totalCount } }',
            context_value=graphql_context,
        )

        assert result.errors

    @pytest.mark.asyncio
    async def test_post_by_title_absent(self, graphql_context):
        data = await run('query { postByTitle(title: "nope") { id } }', graphql_context)

        assert data == {"postByTitle": None}
