"""Tests for the job model."""

import dataclasses
import json

import pytest

from thumbnailer.errors import StoreIOError
from thumbnailer.job import (
    JobReport,
    Rectangle,
    ThumbnailJob,
    ThumbnailOption,
    ThumbnailResult,
)


PAYLOAD = {
    'srcImage': 's3://photos/cat.jpg',
    'dstFolder': 's3://thumbs/',
    'deleteSrc': True,
    'opts': [
        {'width': 100, 'height': 0},
        {'rect': {'min': [10, 10], 'max': [50, 50]}, 'width': 20, 'height': 20},
        {'dstImage': 'file:///tmp/cat.png', 'width': 0, 'height': 64},
    ],
}


class TestRectangle:
    """Tests for Rectangle."""

    def test_box(self):
        """Box is (left, upper, right, lower)."""
        assert Rectangle(min=(10, 20), max=(50, 60)).box == (10, 20, 50, 60)

    def test_box_reversed_corners(self):
        """Reversed corners are canonicalised."""
        assert Rectangle(min=(50, 60), max=(10, 20)).box == (10, 20, 50, 60)

    def test_str(self):
        """String form lists both corners."""
        assert str(Rectangle(min=(1, 2), max=(3, 4))) == 'min: [1, 2], max: [3, 4]'


class TestThumbnailOption:
    """Tests for ThumbnailOption."""

    def test_passthrough(self):
        """Only 0x0 without crop is a passthrough."""
        assert ThumbnailOption().is_passthrough
        assert not ThumbnailOption(width=10).is_passthrough
        assert not ThumbnailOption(rect=Rectangle((0, 0), (5, 5))).is_passthrough

    def test_validate_negative(self):
        """Negative sizes are invalid."""
        errors = ThumbnailOption(width=-1, height=-2).validate()

        assert len(errors) == 2

    def test_immutable(self):
        """Options cannot be changed in place."""
        opt = ThumbnailOption(width=10)

        with pytest.raises(dataclasses.FrozenInstanceError):
            opt.width = 20

    def test_from_dict_defaults(self):
        """Missing fields default to no resize, no crop."""
        opt = ThumbnailOption.from_dict({})

        assert opt == ThumbnailOption()


class TestThumbnailJob:
    """Tests for ThumbnailJob."""

    def test_from_dict(self):
        """Test parsing the wire format."""
        job = ThumbnailJob.from_dict(PAYLOAD)

        assert job.src_image == 's3://photos/cat.jpg'
        assert job.dst_folder == 's3://thumbs/'
        assert job.delete_src is True
        assert len(job.options) == 3
        assert job.options[0] == ThumbnailOption(width=100, height=0)
        assert job.options[1].rect == Rectangle(min=(10, 10), max=(50, 50))
        assert job.options[2].dst_image == 'file:///tmp/cat.png'

    def test_round_trip(self):
        """to_dict writes the wire format back."""
        job = ThumbnailJob.from_dict(PAYLOAD)

        assert ThumbnailJob.from_dict(job.to_dict()) == job
        assert job.to_dict()['opts'][1]['rect'] == {'min': [10, 10], 'max': [50, 50]}

    def test_from_json(self):
        """Test parsing JSON text."""
        job = ThumbnailJob.from_json(json.dumps(PAYLOAD))

        assert len(job.options) == 3

    def test_delete_src_default(self):
        """deleteSrc is optional."""
        job = ThumbnailJob.from_dict({'srcImage': 'file:///a.jpg', 'dstFolder': 'file:///tmp'})

        assert job.delete_src is False
        assert job.options == ()

    def test_options_stored_as_tuple(self):
        """Lists of options are frozen."""
        job = ThumbnailJob(src_image='file:///a.jpg', options=[ThumbnailOption(width=1)])

        assert isinstance(job.options, tuple)

    def test_validate(self):
        """Missing source and folder are reported."""
        job = ThumbnailJob(src_image='', options=(ThumbnailOption(width=-5),))

        errors = job.validate()

        assert len(errors) == 3
        assert errors[2].startswith('opts[0]')

    def test_validate_folder_not_needed(self):
        """dstFolder may be omitted when every option has dstImage."""
        job = ThumbnailJob(
            src_image='file:///a.jpg',
            options=(ThumbnailOption(width=10, dst_image='file:///b.jpg'),)
        )

        assert job.validate() == []


class TestJobReport:
    """Tests for ThumbnailResult and JobReport."""

    def test_result_to_dict(self):
        """Results use the thumbnail/err output schema."""
        ok = ThumbnailResult(index=0, option=ThumbnailOption(), thumbnail='file:///tmp/a.jpg')
        failed = ThumbnailResult(index=1, option=ThumbnailOption(), error=StoreIOError('disk full'))

        assert ok.to_dict() == {'thumbnail': 'file:///tmp/a.jpg', 'err': None}
        assert failed.to_dict() == {'thumbnail': None, 'err': 'disk full'}

    def test_report_ok(self):
        """A report without failures is ok."""
        job = ThumbnailJob(src_image='file:///a.jpg')
        report = JobReport(job=job, results=[
            ThumbnailResult(index=0, option=ThumbnailOption(), thumbnail='file:///b.jpg'),
        ])

        assert report.ok
        assert report.error is None

    def test_report_failed_keeps_successes(self):
        """Failures make the job fail but every result stays visible."""
        job = ThumbnailJob(src_image='file:///a.jpg')
        results = JobReport.sorted_results([
            ThumbnailResult(index=1, option=ThumbnailOption(), error=StoreIOError('boom')),
            ThumbnailResult(index=0, option=ThumbnailOption(), thumbnail='file:///b.jpg'),
        ])
        report = JobReport(job=job, results=results)

        assert not report.ok
        assert 'opts[1]: boom' in report.error
        assert report.to_list() == [
            {'thumbnail': 'file:///b.jpg', 'err': None},
            {'thumbnail': None, 'err': 'boom'},
        ]
