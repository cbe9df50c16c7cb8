"""Source annotation scanner tests."""

from __future__ import annotations

from collection_schema_resolver.source_scanning import ReferenceMapping, extract_annotations

_BLOG_SOURCE = """
import { defineCollection, reference, z } from 'astro:content';

const blog = defineCollection({
  schema: ({ image }) =>
    z.object({
      title: z.string(),
      author: reference('authors'),
      relatedArticles: z.array(reference("articles")).optional(),
      cover: image().optional(),
      seo: z.object({
        author: reference('authors'),
        ogImage: image(),
      }),
      'hero-image': image(),
    }),
});
"""


def test_single_reference_is_recovered() -> None:
    annotations = extract_annotations(_BLOG_SOURCE)

    assert annotations.reference_for("author") == ReferenceMapping(
        field_path="author", collection_name="authors", is_array=False
    )


def test_array_reference_is_recovered_once() -> None:
    annotations = extract_annotations(_BLOG_SOURCE)

    related = [mapping for mapping in annotations.references if mapping.field_path == "relatedArticles"]
    assert related == [
        ReferenceMapping(field_path="relatedArticles", collection_name="articles", is_array=True)
    ]


def test_images_include_chained_and_quoted_keys() -> None:
    annotations = extract_annotations(_BLOG_SOURCE)

    assert annotations.images == frozenset({"cover", "hero-image"})


def test_nested_annotations_are_not_resolved() -> None:
    annotations = extract_annotations(_BLOG_SOURCE)

    assert [mapping.field_path for mapping in annotations.references] == [
        "author",
        "relatedArticles",
    ]
    assert "ogImage" not in annotations.images


def test_declared_fields_follow_source_order() -> None:
    annotations = extract_annotations(_BLOG_SOURCE)

    assert annotations.declared_fields == (
        "title",
        "author",
        "relatedArticles",
        "cover",
        "seo",
        "hero-image",
    )
    assert annotations.optional_fields == frozenset({"relatedArticles", "cover"})


def test_commented_out_declarations_are_ignored() -> None:
    source = """
z.object({
  // author: reference('people'),
  /* cover: image(), */
  title: z.string(),
})
"""

    annotations = extract_annotations(source)

    assert annotations.references == ()
    assert annotations.images == frozenset()
    assert annotations.declared_fields == ("title",)


def test_bare_snippet_without_object_call() -> None:
    annotations = extract_annotations("author: reference('authors')\ncover: image().optional()")

    assert annotations.reference_for("author") is not None
    assert annotations.images == frozenset({"cover"})


def test_strings_containing_braces_do_not_shift_nesting() -> None:
    source = """
z.object({
  title: z.string().default('{ not a brace'),
  author: reference('authors'),
})
"""

    annotations = extract_annotations(source)

    assert annotations.reference_for("author") is not None


def test_source_without_annotations_yields_empty_result() -> None:
    annotations = extract_annotations("export const nothing = 1;")

    assert annotations.is_empty
