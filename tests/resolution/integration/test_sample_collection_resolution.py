"""Resolution of the sample content project."""

from __future__ import annotations

from pathlib import Path

from collection_schema_resolver.configuration import load_configuration
from collection_schema_resolver.field_model import FieldKind, IssueKind, to_payload
from collection_schema_resolver.resolution import resolve_configured_collections


def _samples() -> Path:
    return Path(__file__).resolve().parents[3] / "samples"


def _resolve(name: str):
    configuration = load_configuration(_samples() / "collections.yaml")
    ((_, schema),) = resolve_configured_collections(configuration, [name])
    return schema


def test_blog_sample_resolves_in_declaration_order() -> None:
    schema = _resolve("blog")

    assert schema.degraded is False
    assert schema.field_names == (
        "title",
        "description",
        "pubDate",
        "draft",
        "author",
        "relatedArticles",
        "cover",
        "tags",
        "status",
        "layout",
        "rating",
        "seo.title",
        "seo.author",
        "metadata.category",
        "metadata.priority",
        "links",
        "translations",
        "location",
        "publishedAt",
    )
    assert [field.order for field in schema.fields] == list(range(len(schema.fields)))


def test_blog_sample_field_types() -> None:
    schema = _resolve("blog")
    kinds = {field.name: field.kind for field in schema.fields}

    assert kinds["pubDate"] is FieldKind.DATE
    assert kinds["author"] is FieldKind.REFERENCE
    assert kinds["relatedArticles"] is FieldKind.ARRAY_REFERENCE
    assert kinds["cover"] is FieldKind.IMAGE
    assert kinds["status"] is FieldKind.ENUM
    assert kinds["layout"] is FieldKind.LITERAL
    assert kinds["translations"] is FieldKind.RECORD
    assert kinds["location"] is FieldKind.TUPLE
    assert kinds["publishedAt"] is FieldKind.UNION
    assert kinds["links"] is FieldKind.ARRAY


def test_blog_sample_references_and_nesting() -> None:
    schema = _resolve("blog")

    author = schema.field_named("author")
    related = schema.field_named("relatedArticles")
    seo_author = schema.field_named("seo.author")
    category = schema.field_named("metadata.category")
    assert author is not None and author.reference_collection == "authors"
    assert related is not None and related.reference_collection == "blog"
    assert seo_author is not None and seo_author.reference_collection is None
    assert category is not None
    assert category.required is True
    assert category.parent_path == "metadata"
    assert schema.field_named("metadata") is None
    assert [(issue.kind, issue.path) for issue in schema.issues] == [
        (IssueKind.AMBIGUOUS_REFERENCE, "seo.author")
    ]


def test_renamed_collection_uses_its_own_definition() -> None:
    schema = _resolve("team-members")

    kinds = {field.name: field.kind for field in schema.fields}
    assert kinds == {
        "name": FieldKind.STRING,
        "avatar": FieldKind.IMAGE,
        "website": FieldKind.STRING,
    }


def test_payload_is_camel_cased_and_ordered() -> None:
    payload = to_payload(_resolve("blog"), camel_case=True)

    assert payload["collectionName"] == "blog"
    assert [field["name"] for field in payload["fields"]][:3] == ["title", "description", "pubDate"]
    author = payload["fields"][4]
    assert author["fieldType"] == {"kind": "reference"}
    assert author["referenceCollection"] == "authors"
