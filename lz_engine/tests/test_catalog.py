"""
Tests for the template catalog.
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from lz_engine.catalog import (
    CATEGORY_INFO,
    LandingZoneTemplate,
    ParameterType,
    TemplateCatalog,
    TemplateCategory,
    TemplateParameter,
    default_parameters,
    validate_template,
)
from lz_engine.requirements import CloudProviderType


class TestSeedData:

    def test_seed_templates(self):
        catalog = TemplateCatalog()
        assert catalog.count == 3
        costs = {t.id: t.estimated_monthly_cost for t in catalog.list()}
        assert costs == {
            'template-basic-ai': 500.0,
            'template-enterprise-ai': 2500.0,
            'template-mlops': 1200.0,
        }

    def test_only_enterprise_has_gpu(self):
        gpu = [t.id for t in TemplateCatalog().list() if t.supports_gpu]
        assert gpu == ['template-enterprise-ai']

    def test_seed_templates_are_valid(self):
        for template in TemplateCatalog().list():
            assert validate_template(template) == []

    def test_catalogs_do_not_share_state(self):
        a = TemplateCatalog()
        b = TemplateCatalog()
        a.get_by_id('template-basic-ai').name = 'changed'
        assert b.get_by_id('template-basic-ai').name == 'Basic AI Development'

    def test_category_info_covers_every_category(self):
        assert {info['type'] for info in CATEGORY_INFO} == set(TemplateCategory)

    def test_unseeded(self):
        assert TemplateCatalog(seed=False).count == 0


class TestQueries:

    def test_by_category(self):
        found = TemplateCatalog().by_category(TemplateCategory.MLOPS)
        assert [t.id for t in found] == ['template-mlops']

    def test_by_cloud_provider(self):
        catalog = TemplateCatalog()
        assert [t.id for t in catalog.by_cloud_provider(CloudProviderType.AWS)] == [
            'template-basic-ai', 'template-mlops',
        ]
        assert catalog.by_cloud_provider(CloudProviderType.GCP) == []

    def test_inactive_templates_hidden(self):
        catalog = TemplateCatalog()
        catalog.update('template-mlops', {'is_active': False})
        assert 'template-mlops' not in [t.id for t in catalog.list(active_only=True)]
        assert catalog.by_category(TemplateCategory.MLOPS) == []
        assert catalog.count == 3

    def test_get_missing(self):
        assert TemplateCatalog().get_by_id('nope') is None


class TestMutations:

    def test_update_skips_empty_values(self):
        catalog = TemplateCatalog()
        updated = catalog.update('template-basic-ai', {
            'name': '',
            'description': 'Updated',
            'required_features': [],
            'estimated_monthly_cost': 650.0,
        })
        assert updated.name == 'Basic AI Development'
        assert updated.description == 'Updated'
        assert updated.required_features == ['Machine Learning', 'Basic Storage']
        assert updated.estimated_monthly_cost == 650.0

    def test_update_missing(self):
        assert TemplateCatalog().update('nope', {'name': 'x'}) is None

    def test_remove(self):
        catalog = TemplateCatalog()
        assert catalog.remove('template-mlops')
        assert not catalog.remove('template-mlops')
        assert catalog.count == 2

    def test_clone(self):
        catalog = TemplateCatalog()
        cloned = catalog.clone('template-enterprise-ai', 'Enterprise Copy')

        assert cloned.id != 'template-enterprise-ai'
        assert cloned.name == 'Enterprise Copy'
        assert cloned.version == '1.0.0'
        assert cloned.description == (
            'Cloned from: Full enterprise AI platform with security, compliance, and governance'
        )
        assert cloned.supports_gpu
        assert catalog.count == 4

        cloned.parameters['nodeCount'].default_value = 9
        assert catalog.get_by_id('template-enterprise-ai').parameters['nodeCount'].default_value == 5

    def test_clone_missing(self):
        assert TemplateCatalog().clone('nope', 'x') is None


class TestValidation:

    def test_collects_all_errors(self):
        template = LandingZoneTemplate(
            name='',
            parameters={
                'size': TemplateParameter(name='size', type=ParameterType.NUMBER, required=True),
                'blank': TemplateParameter(name=''),
            },
        )
        errors = validate_template(template)
        assert errors == [
            'Template name is required',
            'Template description is required',
            'At least one cloud provider must be supported',
            'Required parameter size must have a default value',
            'Parameter blank must have a name',
        ]

    def test_default_parameters(self):
        template = TemplateCatalog().get_by_id('template-basic-ai')
        assert default_parameters(template) == {'environment': 'dev', 'nodeCount': 2}

    def test_default_parameters_skip_missing(self):
        template = LandingZoneTemplate(
            name='t',
            parameters={'a': TemplateParameter(name='a'), 'b': TemplateParameter(name='b', default_value=False)},
        )
        assert default_parameters(template) == {'b': False}
