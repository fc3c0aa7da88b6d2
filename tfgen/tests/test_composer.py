"""
Tests for document composition.
"""

from tfgen.domain.pattern_models import Fragment
from tfgen.services.composer import compose, compose_explanation, render_preamble
from tfgen.services.pattern_catalog import base_params, build_fragments, match_patterns


def _fragments(text, known_regions):
    result = match_patterns(text, known_regions)
    return build_fragments(text, result.patterns, base_params(text, result.region)), result.region


def test_preamble_binds_region():
    preamble = render_preamble('us-east-1')
    assert 'source  = "hashicorp/aws"' in preamble
    assert 'version = "~> 5.0"' in preamble
    assert 'region = "us-east-1"' in preamble


def test_no_fragments_yields_network_only_default():
    document = compose([], 'eu-central-1')

    assert document.network_only
    assert document.code.count('resource "aws_vpc"') == 1
    assert document.code.count('resource "aws_subnet"') == 1
    assert 'data "aws_availability_zones" "available"' in document.code
    assert document.pattern_ids == []


def test_multiple_fragments_share_one_network_fragment(known_regions):
    fragments, region = _fragments('web server with a mysql database and a load balancer', known_regions)
    document = compose(fragments, region)

    assert len(fragments) == 3
    assert document.code.count('terraform {') == 1
    assert document.code.count('provider "aws"') == 1
    assert document.code.count('resource "aws_vpc"') == 1
    assert document.code.count('data "aws_availability_zones"') == 1


def test_fragments_are_included_verbatim_in_order(known_regions):
    fragments, region = _fragments('an s3 bucket and a lambda function', known_regions)
    document = compose(fragments, region)

    positions = [document.code.index(fragment.code) for fragment in fragments]
    assert positions == sorted(positions)
    assert document.code.index('resource "aws_vpc"') < positions[0]


def test_explanation_lists_region_and_detected_patterns():
    fragment = Fragment(code='# x', explanation='Creates a thing.', pattern_id='object_storage')
    document = compose([fragment], 'eu-west-1')
    explanation = compose_explanation(document)

    assert explanation.startswith('Region: eu-west-1')
    assert 'Detected resources: object_storage' in explanation
    assert 'Creates a thing.' in explanation
    assert 'terraform init' in explanation


def test_network_only_explanation_guides_the_user():
    explanation = compose_explanation(compose([], 'eu-central-1'))
    assert "couldn't identify specific AWS resources" in explanation
