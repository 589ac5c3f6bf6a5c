"""Tests for interface compliance and exactness of the reference test posteriors."""

import math

import pytest
import torch

from sgtorch import (
    HeavyLightTailPosterior,
    LaplacePosterior,
    NealsFunnelPosterior,
    ReferencePosterior,
    ReferenceSamplingConfig,
    SkewTPosterior,
    posterior_name,
    skew_generalized_t_log_density,
)


# Test fixtures for each posterior type
@pytest.fixture
def skew_t_model():
    """Create the registered skew-t posterior."""
    return SkewTPosterior()

@pytest.fixture
def laplace_model():
    """Create the registered Laplacian 1 posterior."""
    return LaplacePosterior(N=2, r=1.0)

@pytest.fixture
def heavy_light_model():
    """Create the registered heavy/light tail posterior."""
    return HeavyLightTailPosterior(r=4.0)

@pytest.fixture
def funnel_model():
    """Create Neal's funnel."""
    return NealsFunnelPosterior()


MODELS = ['skew_t_model', 'laplace_model', 'heavy_light_model', 'funnel_model']


@pytest.mark.parametrize('model_fixture', MODELS)
class TestInterfaceCompliance:
    """Test that all posteriors comply with the ReferencePosterior protocol."""

    def test_protocol_compliance(self, model_fixture, request):
        model = request.getfixturevalue(model_fixture)
        assert isinstance(model, ReferencePosterior)

    def test_has_required_attributes(self, model_fixture, request):
        model = request.getfixturevalue(model_fixture)
        assert isinstance(model.device, torch.device)
        assert isinstance(model.dtype, torch.dtype)
        assert isinstance(model.name, str)
        assert isinstance(model.config, ReferenceSamplingConfig)

    def test_dimensions_match_dim(self, model_fixture, request):
        model = request.getfixturevalue(model_fixture)
        assert sum(model.dimensions().values()) == model.dim

    def test_posterior_name(self, model_fixture, request):
        model = request.getfixturevalue(model_fixture)
        assert posterior_name(model) == f"{model.name}-{model.name}"

    def test_sample_shape_and_dtype(self, model_fixture, request):
        model = request.getfixturevalue(model_fixture)
        draws = model.sample(100)
        assert draws.shape == (100, model.dim)
        assert draws.dtype == model.dtype
        assert torch.isfinite(draws).all()

    def test_default_sample_size(self, model_fixture, request):
        model = request.getfixturevalue(model_fixture)
        assert model.sample().shape == (model.config.total_draws, model.dim)

    def test_sample_reproducible(self, model_fixture, request):
        model = request.getfixturevalue(model_fixture)
        assert torch.equal(model.sample(50, seed=3), model.sample(50, seed=3))
        assert not torch.equal(model.sample(50, seed=3), model.sample(50, seed=4))

    def test_sample_keywords_and_default_seed(self, model_fixture, request):
        model = request.getfixturevalue(model_fixture)
        by_keyword = model.sample(num_draws=20, seed=model.config.seed)
        assert by_keyword.shape == (20, model.dim)
        assert torch.equal(by_keyword, model.sample(num_draws=20))

    def test_log_prob_batched(self, model_fixture, request):
        model = request.getfixturevalue(model_fixture)
        draws = model.sample(24).reshape(4, 6, model.dim)
        lp = model.log_prob(draws)
        assert lp.shape == (4, 6)
        assert torch.isfinite(lp).all()

    def test_log_prob_rejects_wrong_width(self, model_fixture, request):
        model = request.getfixturevalue(model_fixture)
        with pytest.raises(ValueError, match="Draws must have shape"):
            model.log_prob(torch.zeros(3, model.dim + 1))


class TestReferenceSamplingConfig:
    """Test the reference sampling configuration."""

    def test_defaults(self):
        config = ReferenceSamplingConfig()
        assert config.chains == 10
        assert config.seed == 4711
        assert config.adapt_delta == 0.92
        assert config.draws_per_chain == 1000
        assert config.total_draws == 10_000

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"chains": 0},
            {"warmup": 20_000},
            {"thin": 0},
            {"adapt_delta": 1.0},
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            ReferenceSamplingConfig(**kwargs)


class TestSkewTPosterior:

    def test_data(self, skew_t_model):
        assert skew_t_model.data() == {
            "N": 2, "mu": 0.0, "sigma": 1.0, "lambda": 0.9, "p": 3.0, "q": 10.0,
        }
        assert skew_t_model.name == "test-skew_t"

    def test_log_prob_matches_density(self, skew_t_model):
        x = torch.tensor([0.0, 0.0], dtype=torch.float64)
        expected = skew_generalized_t_log_density(x, 0.0, 1.0, 0.9, 3.0, 10.0)
        assert skew_t_model.log_prob(x).item() == pytest.approx(expected.item(), rel=1e-12)

    def test_sample_moments(self, skew_t_model):
        draws = skew_t_model.sample(20_000)
        assert draws.mean().item() == pytest.approx(0.0, abs=0.03)
        assert draws.std().item() == pytest.approx(1.0, abs=0.05)

    def test_invalid_parameters(self):
        with pytest.raises(ValueError, match="lambda"):
            SkewTPosterior(lam=1.0)


class TestLaplacePosterior:

    def test_name_and_data(self, laplace_model):
        assert laplace_model.name == "test-laplace_1"
        assert laplace_model.data() == {"N": 2, "r": 1.0}
        assert LaplacePosterior(r=2.5).name == "test-laplace_2.5"

    def test_log_prob(self, laplace_model):
        x = torch.tensor([[3.0, 4.0], [0.0, 0.0]], dtype=torch.float64)
        assert torch.allclose(laplace_model.log_prob(x), torch.tensor([-5.0, 0.0], dtype=torch.float64))

    def test_sample_radius(self, laplace_model):
        """||x||^r ~ Gamma(N/r, 1) has mean N/r."""
        draws = laplace_model.sample(20_000)
        radius_r = torch.linalg.vector_norm(draws, dim=-1) ** laplace_model.r
        assert radius_r.mean().item() == pytest.approx(2.0, abs=0.05)

    def test_invalid_r(self):
        with pytest.raises(ValueError, match="r must be positive"):
            LaplacePosterior(r=0.0)


class TestHeavyLightTailPosterior:

    def test_log_prob(self, heavy_light_model):
        x = torch.tensor([-2.0, -1.5], dtype=torch.float64)
        assert heavy_light_model.log_prob(x).item() == pytest.approx(-2.0 - 1.5 ** 4)

    def test_sample_moments(self, heavy_light_model):
        draws = heavy_light_model.sample(20_000)
        # Laplace(0, 1) has variance 2
        assert draws[:, 0].var().item() == pytest.approx(2.0, abs=0.1)
        assert draws[:, 1].abs().max().item() < 3.0

    def test_sampling_needs_even_r(self):
        with pytest.raises(ValueError, match="even integer"):
            HeavyLightTailPosterior(r=3.0).sample(10)


class TestNealsFunnelPosterior:

    def test_data_and_dimensions(self, funnel_model):
        assert funnel_model.data() == {}
        assert funnel_model.dimensions() == {"x": 1, "y": 1}

    def test_log_prob_standard_normal(self, funnel_model):
        z = torch.zeros(2, dtype=torch.float64)
        assert funnel_model.log_prob(z).item() == pytest.approx(-math.log(2.0 * math.pi))

    def test_log_prob_reuses_base_distribution(self, funnel_model):
        base = funnel_model.std_normal
        funnel_model.log_prob(torch.zeros(3, 2, dtype=torch.float64))
        funnel_model.log_prob(torch.ones(2, dtype=torch.float64))
        assert funnel_model.std_normal is base
        assert base.loc.dtype == funnel_model.dtype

    def test_constrain(self, funnel_model):
        z = torch.tensor([[1.0, 2.0]], dtype=torch.float64)
        xy = funnel_model.constrain(z)
        assert xy[0, 1].item() == pytest.approx(3.0)
        assert xy[0, 0].item() == pytest.approx(math.exp(1.5) * 2.0)

    def test_constrained_sample_moments(self, funnel_model):
        xy = funnel_model.constrain(funnel_model.sample(20_000))
        assert xy[:, 1].std().item() == pytest.approx(3.0, abs=0.1)
        assert xy[:, 1].mean().item() == pytest.approx(0.0, abs=0.1)
