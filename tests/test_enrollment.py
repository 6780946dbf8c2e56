from iotlock.core.results import ErrorKind
from iotlock.db.models import UploadedImage, Visitor


def _photos(tmp_path, count):
    paths = []
    for index in range(count):
        path = tmp_path / f"face-{index}.jpg"
        path.write_bytes(b"\xff\xd8\xff" + bytes([index]) * 16)
        paths.append(path)
    return paths


async def test_memorize_uploads_photos_and_creates_visitor(ctx, db, tmp_path):
    outcome = await ctx.enrollment.memorize("  Grandma ", _photos(tmp_path, 2))

    assert outcome
    assert outcome.message == "Successfully memorized Grandma with 2 photo(s)."
    urls = outcome.data["image_urls"]
    assert len(urls) == 2
    assert all("/upload/images/" in url for url in urls)

    db.expire_all()
    visitor = db.query(Visitor).one()
    assert visitor.name == "Grandma"
    assert visitor.profile_image_url == urls[0]
    assert db.query(UploadedImage).filter(UploadedImage.content_type == "image/jpeg").count() == 2


async def test_memorize_validates_input(ctx, tmp_path):
    no_photos = await ctx.enrollment.memorize("Grandma", [])
    no_name = await ctx.enrollment.memorize("   ", _photos(tmp_path, 1))

    for outcome in (no_photos, no_name):
        assert outcome.kind == ErrorKind.validation
        assert outcome.message == "Please add at least one photo and enter a name"


async def test_memorize_with_unreadable_photo(ctx, tmp_path):
    outcome = await ctx.enrollment.memorize("Grandma", [tmp_path / "missing.jpg"])
    assert outcome.kind == ErrorKind.validation
    assert not ctx.enrollment.is_processing


async def test_memorize_with_wrong_api_key(ctx, db, tmp_path):
    ctx.api.settings = ctx.settings.model_copy(update={"API_KEY": "wrong-key"})

    outcome = await ctx.enrollment.memorize("Grandma", _photos(tmp_path, 1))

    assert not outcome
    assert outcome.kind == ErrorKind.http
    assert outcome.message == "Invalid API key"
    db.expire_all()
    assert db.query(Visitor).count() == 0
