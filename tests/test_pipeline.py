"""
Unit tests for the extraction stages and pipeline.
"""

import hashlib
import threading

import mutagen
import pytest
from PIL import Image
from PIL.TiffImagePlugin import IFDRational

from fileinventory.errors import ExtractionError
from fileinventory.models import FileRecord
from fileinventory.scanner.exif import extract_image_metadata, strip_metadata
from fileinventory.scanner.hashing import calculate_file_hash
from fileinventory.scanner.parallel import run_stage
from fileinventory.scanner.pipeline import (
    AUDIO_TAG_STAGE,
    HASH_STAGE,
    IMAGE_METADATA_STAGE,
    ExtractionPipeline,
    Stage,
)
from fileinventory.scanner.tags import extract_audio_tags


def _record(path):
    return FileRecord(root_dir=str(path.parent), relative_name=path.name,
                      size=path.stat().st_size)


class FakeExif(dict):
    """Stands in for PIL.Image.Exif with preset sub-IFDs."""

    def __init__(self, ifd0, sub_ifds):
        super().__init__(ifd0)
        self._sub_ifds = sub_ifds

    def get_ifd(self, tag):
        return self._sub_ifds.get(tag, {})


class FakeAudio:
    def __init__(self, tags):
        self.tags = tags


class TestCalculateFileHash:
    """Test calculate_file_hash function."""

    def test_matches_hashlib(self, temp_dir):
        path = temp_dir / "data.bin"
        data = b"x" * 200_000
        path.write_bytes(data)
        assert calculate_file_hash(path) == hashlib.sha256(data).hexdigest()

    def test_identical_files_same_hash(self, sample_tree):
        assert calculate_file_hash(sample_tree / "a.txt") == calculate_file_hash(sample_tree / "b.txt")

    def test_nonexistent_file(self, temp_dir):
        with pytest.raises(ExtractionError) as excinfo:
            calculate_file_hash(temp_dir / "missing.bin")
        assert excinfo.value.operation == 'hash'


class TestExtractAudioTags:
    """Test extract_audio_tags with mutagen stubbed out."""

    def test_extracts_fields_and_strips_nulls(self, temp_dir, monkeypatch):
        monkeypatch.setattr(mutagen, "File", lambda path, easy=True: FakeAudio({
            'title': ['Song\x00'],
            'artist': ['The\x00 Band'],
            'album': ['LP'],
            'date': ['1997-05-21'],
            'genre': ['Rock'],
        }))
        tags = extract_audio_tags(temp_dir / "song.mp3")
        assert tags == {'title': 'Song', 'artist': 'The Band', 'album': 'LP', 'year': '1997'}

    def test_missing_tags(self, temp_dir, monkeypatch):
        monkeypatch.setattr(mutagen, "File", lambda path, easy=True: FakeAudio(None))
        tags = extract_audio_tags(temp_dir / "song.flac")
        assert tags == {'title': None, 'artist': None, 'album': None, 'year': None}

    def test_unrecognized_file(self, temp_dir, monkeypatch):
        monkeypatch.setattr(mutagen, "File", lambda path, easy=True: None)
        with pytest.raises(ExtractionError):
            extract_audio_tags(temp_dir / "song.mp3")

    def test_parser_failure(self, temp_dir):
        path = temp_dir / "broken.mp3"
        path.write_bytes(b"\x00" * 16)
        with pytest.raises(ExtractionError) as excinfo:
            extract_audio_tags(path)
        assert excinfo.value.operation == 'audio_tags'


class TestImageMetadata:
    """Test image metadata extraction and stripping."""

    def test_strip_metadata_drops_opaque_fields(self):
        exif = FakeExif(
            {0x010F: 'Cam\x00', 0x0110: 'Model X', 0x011A: IFDRational(72, 1),
             0x8769: 1234, 0x8825: 5678},
            {
                0x8769: {0x927C: b'\x01\x02maker', 0x9003: '2020:01:01 10:00:00',
                         0xA005: 99, 0x9286: b'\xff\xfe\x00binary'},
                0x8825: {1: 'N', 2: (IFDRational(52, 1), IFDRational(30, 1), IFDRational(0, 1)),
                         27: b'ASCII\x00\x00\x00GPS'},
            },
        )
        result = strip_metadata(exif)

        assert result['exif']['Make'] == 'Cam'
        assert result['exif']['Model'] == 'Model X'
        assert result['exif']['XResolution'] == 72.0
        assert result['exif']['DateTimeOriginal'] == '2020:01:01 10:00:00'
        assert 'MakerNote' not in result['exif']
        assert 'ExifOffset' not in result['exif']
        assert 'GPSInfo' not in result['exif']
        assert 'ExifInteroperabilityOffset' not in result['exif']
        # Undecodable binary is dropped
        assert 'UserComment' not in result['exif']

        assert result['gps']['GPSLatitudeRef'] == 'N'
        assert result['gps']['GPSLatitude'] == [52.0, 30.0, 0.0]
        assert 'GPSProcessingMethod' not in result['gps']

    def test_extract_from_jpeg(self, temp_dir):
        path = temp_dir / "photo.jpg"
        exif = Image.Exif()
        exif[0x010F] = "TestCam"
        Image.new('RGB', (32, 16), color='blue').save(path, 'JPEG', exif=exif)

        metadata = extract_image_metadata(path)
        assert metadata['format'] == 'JPEG'
        assert metadata['width'] == 32
        assert metadata['height'] == 16
        assert metadata['mode'] == 'RGB'
        assert metadata['exif']['Make'] == 'TestCam'
        assert metadata['gps'] == {}

    def test_png_without_exif(self, sample_tree):
        metadata = extract_image_metadata(sample_tree / "photo.png")
        assert metadata['format'] == 'PNG'
        assert metadata['exif'] == {}

    def test_not_an_image(self, temp_dir):
        path = temp_dir / "fake.jpg"
        path.write_text("not an image")
        with pytest.raises(ExtractionError) as excinfo:
            extract_image_metadata(path)
        assert excinfo.value.operation == 'image_metadata'


class TestStage:
    """Test Stage selection rules."""

    def test_hash_applies_to_everything(self, make_record):
        assert HASH_STAGE.applies(make_record("anything.xyz"))

    def test_extension_filters(self, make_record):
        assert AUDIO_TAG_STAGE.applies(make_record("song.MP3"))
        assert not AUDIO_TAG_STAGE.applies(make_record("photo.jpg"))
        assert IMAGE_METADATA_STAGE.applies(make_record("photo.JPG"))
        assert not IMAGE_METADATA_STAGE.applies(make_record("song.mp3"))

    def test_needs(self, make_record):
        assert HASH_STAGE.needs(make_record())
        assert not HASH_STAGE.needs(make_record(content_hash="h"))
        assert HASH_STAGE.needs(make_record(content_hash="h"), force=True)
        assert not AUDIO_TAG_STAGE.needs(make_record("a.txt"), force=True)


class TestRunStage:
    """Test run_stage worker pool."""

    def test_assigns_results(self, make_record):
        stage = Stage(name='hash', field='content_hash', description='Hashing',
                      extract=lambda path: "h:" + path)
        records = [make_record(f"{i}.bin") for i in range(20)]
        stats = run_stage(stage, records, max_workers=4, show_progress=False)
        assert stats.completed == 20
        assert all(r.content_hash == "h:" + r.path for r in records)

    def test_failure_is_not_fatal(self, make_record):
        def extract(path):
            if path.endswith("bad.bin"):
                raise ExtractionError("boom", path=path, operation='hash')
            return "ok"

        stage = Stage(name='hash', field='content_hash', description='Hashing', extract=extract)
        good, bad = make_record("good.bin"), make_record("bad.bin", content_hash="stale")
        stats = run_stage(stage, [good, bad], max_workers=2, show_progress=False)

        assert stats.completed == 1
        assert stats.failed == 1
        assert good.content_hash == "ok"
        assert bad.content_hash is None

    def test_pool_is_bounded(self, make_record):
        lock = threading.Lock()
        active = [0]
        peak = [0]
        release = threading.Event()

        def extract(path):
            with lock:
                active[0] += 1
                peak[0] = max(peak[0], active[0])
            release.wait(0.01)
            with lock:
                active[0] -= 1
            return "h"

        stage = Stage(name='hash', field='content_hash', description='Hashing', extract=extract)
        run_stage(stage, [make_record(f"{i}") for i in range(30)], max_workers=3,
                  show_progress=False)
        assert peak[0] <= 3

    def test_progress_callback(self, make_record):
        calls = []
        stage = Stage(name='hash', field='content_hash', description='Hashing',
                      extract=lambda path: "h")
        run_stage(stage, [make_record(f"{i}") for i in range(5)], max_workers=2,
                  show_progress=False, progress_callback=lambda c, t: calls.append((c, t)))
        assert calls[-1] == (5, 5)


class TestExtractionPipeline:
    """Test ExtractionPipeline over real files."""

    def test_runs_all_stages(self, sample_tree, temp_dir, monkeypatch):
        song = sample_tree / "song.mp3"
        song.write_bytes(b"ID3fake")
        monkeypatch.setattr(mutagen, "File", lambda path, easy=True: FakeAudio({'title': ['T']}))

        records = [_record(sample_tree / name) for name in ("a.txt", "photo.png", "song.mp3")]
        stats = ExtractionPipeline(max_workers=2, show_progress=False).run(records)

        a, photo, mp3 = records
        assert a.content_hash == hashlib.sha256(b"hello").hexdigest()
        assert a.audio_tags is None and a.image_metadata is None
        assert photo.image_metadata['width'] == 20
        assert mp3.audio_tags['title'] == 'T'
        assert [s.stage for s in stats] == ['hash', 'audio_tags', 'image_metadata']
        assert stats[0].completed == 3

    def test_skips_records_with_fields(self, sample_tree):
        calls = []
        stage = Stage(name='hash', field='content_hash', description='Hashing',
                      extract=lambda path: calls.append(path) or "new")
        done = _record(sample_tree / "a.txt")
        done.content_hash = "cached"
        todo = _record(sample_tree / "b.txt")

        stats = ExtractionPipeline(stages=[stage], show_progress=False).run([done, todo])
        assert calls == [todo.path]
        assert done.content_hash == "cached"
        assert stats[0].skipped == 1

    def test_force_is_per_stage(self, sample_tree):
        hashed, read = [], []
        hash_stage = Stage(name='hash', field='content_hash', description='Hashing',
                           extract=lambda path: hashed.append(path) or "h")
        image_stage = Stage(name='image_metadata', field='image_metadata',
                            description='Reading image metadata',
                            extract=lambda path: read.append(path) or {},
                            extensions=frozenset({'.png'}))
        photo = _record(sample_tree / "photo.png")
        photo.content_hash = "h0"
        photo.image_metadata = {'format': 'PNG'}

        pipeline = ExtractionPipeline(
            stages=[hash_stage, image_stage],
            force={'image_metadata': True},
            show_progress=False,
        )
        pipeline.run([photo])
        assert hashed == []
        assert read == [photo.path]
        assert photo.content_hash == "h0"
