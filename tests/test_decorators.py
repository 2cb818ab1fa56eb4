"""Tests for contentdb.decorators — model declaration and registration."""

import pytest

from contentdb import Variable, content_model, datafile_model, define_model
from contentdb.engine.config import ModelConfig
from contentdb.engine.errors import ContentDBConfigError
from contentdb.engine.registry import model_registry
from contentdb.models import ContentModel, DatafileModel


class TestContentModelDecorator:
    def test_bare(self):
        @content_model
        class Page(ContentModel):
            title = Variable()

        assert isinstance(Page.model_config(), ModelConfig)
        assert Page.model_config().variables == ("title",)
        assert model_registry.resolve("page").model_class is Page

    def test_with_arguments(self):
        @content_model(name="blog", base_path="/srv/site", folder="/_posts/", variables=["title", "date"])
        class Post(ContentModel):
            pass

        config = Post.model_config()
        assert config.base_path == "/srv/site"
        assert config.folder_path == "_posts"
        assert config.variables == ("title", "date")
        assert isinstance(Post.title, Variable)

        entry = model_registry.resolve("blog")
        assert entry.kind == "content"
        assert entry.qualified_name == "content.blog"

    def test_decorator_and_class_body_variables(self):
        @content_model(variables=["title"])
        class Post(ContentModel):
            summary = Variable()
            date = Variable()

        assert Post.model_config().variables == ("title", "summary", "date")

    def test_inherits_parent_config(self):
        @content_model(base_path="/srv/site", folder="_posts", variables=["title"], include_root=True)
        class Post(ContentModel):
            pass

        @content_model(variables=["series"])
        class SeriesPost(Post):
            pass

        config = SeriesPost.model_config()
        assert config.variables == ("title", "series")
        assert config.folder_path == "_posts"
        assert config.base_path == "/srv/site"
        assert config.include_root is True
        assert Post.model_config().variables == ("title",)

    def test_instances_get_declared_fields(self):
        @content_model(variables=["title"])
        class Post(ContentModel):
            pass

        post = Post(title="Hi")
        assert post.title == "Hi"
        assert post.variable_names == ["title"]

    def test_reserved_name(self):
        with pytest.raises(ContentDBConfigError, match="shadow"):
            @content_model(variables=["content"])
            class Post(ContentModel):
                pass

    def test_shadowing_method(self):
        with pytest.raises(ContentDBConfigError):
            @content_model(variables=["save"])
            class Post(ContentModel):
                pass

    def test_invalid_variable_name(self):
        with pytest.raises(ContentDBConfigError, match="Invalid configuration"):
            @content_model(variables=["not-valid"])
            class Post(ContentModel):
                pass

    def test_requires_subclass(self):
        with pytest.raises(ContentDBConfigError, match="requires a subclass"):
            @content_model
            class Loose:
                pass

    def test_unregistered(self):
        @content_model(register=False)
        class Scratch(ContentModel):
            pass

        assert not model_registry.contains("scratch")

    def test_unregistered_decorator_reused(self):
        unregistered = content_model(register=False)

        @unregistered
        class First(ContentModel):
            pass

        @unregistered
        class Second(ContentModel):
            pass

        assert not model_registry.contains("first")
        assert not model_registry.contains("second")


class TestDatafileModelDecorator:
    def test_registers_as_datafile(self):
        @datafile_model(folder="_data", variables=["name", "url"])
        class NavLink(DatafileModel):
            pass

        entry = model_registry.resolve("nav_link")
        assert entry.kind == "datafile"
        assert NavLink.model_config().folder_path == "_data"

    def test_content_model_rejected(self):
        with pytest.raises(ContentDBConfigError):
            @datafile_model
            class Post(ContentModel):
                pass


class TestDefineModel:
    def test_content(self, tmp_path):
        model = define_model("Note", base_path=str(tmp_path), folder="notes", variables=["title"])
        assert issubclass(model, ContentModel)
        assert model.__name__ == "Note"
        assert model.base_path() == str(tmp_path)
        assert model_registry.count == 0

    def test_datafile(self):
        model = define_model("Entry", "datafile", variables=["name"])
        assert issubclass(model, DatafileModel)

    def test_registered_on_request(self):
        define_model("Note", register=True)
        assert model_registry.contains("note")

    def test_unknown_kind(self):
        with pytest.raises(ValueError, match="Unknown model kind"):
            define_model("Thing", "table")
