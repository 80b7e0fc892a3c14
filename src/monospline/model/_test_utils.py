import numpy as np
from scipy import stats

# regression data sets of empirical CDF samples; near-duplicate x values are deliberate
EMPIRICAL_CDF_Y = np.round(np.arange(51) * 0.02, 12)

REPRO_X_UNIFORM = np.array([
    2.417586222325241E-6, 0.01833989628165254, 0.03881204328343747, 0.06027210493545283,
    0.08641191222046411, 0.08920708170338688, 0.11856432752175541, 0.1271093283793493,
    0.15611716035693607, 0.17812340282854217, 0.2003336549968174, 0.21010068304660953,
    0.24461903435787338, 0.25330687443961475, 0.2938177183897125, 0.3087980028802898,
    0.3234689455608389, 0.3234689455608389, 0.3234689455608389, 0.3874888123642846,
    0.4037770547454288, 0.4037770547454288, 0.4451537836690316, 0.45466841689883003,
    0.4922791775622433, 0.5049112468735633, 0.5097110552769382, 0.542354984673194,
    0.5625051862341103, 0.5812081076929951, 0.5812081076929951, 0.624748141181579,
    0.6457634498888773, 0.649465590009825, 0.6792874416836917, 0.7015743319002873,
    0.7250186518350656, 0.7257475192866188, 0.7638636260578827, 0.7751265901018766,
    0.7751265901018766, 0.8204162734846717, 0.844432325829453, 0.8621117530632927,
    0.8621117530632927, 0.8984423523978251, 0.9137609097873816, 0.9453317721241555,
    0.9532748155064319, 0.9794713197145162, 0.9999049187132192,
])

REPRO_X_NORMAL = np.array([
    -4.184507076820324, -2.1146902974778965, -1.7709154201703174, -1.5333773805478366,
    -1.3456728173480172, -1.2437838008041608, -1.233006036263326, -1.073638975747641,
    -0.9803883478450147, -0.9033586284461634, -0.8916327289429522, -0.7504705542249223,
    -0.695307246427601, -0.6411508285039249, -0.6276275581243719, -0.5127434127323376,
    -0.44710629582025563, -0.3853137917199486, -0.3853137917199486, -0.3485233683113338,
    -0.3008475838732653, -0.22625442301493448, -0.15166126215660358, -0.14303406197096172,
    -0.14303406197096172, 0.0026039423924754945, 0.053096546820946555, 0.0993039111521562,
    0.0993039111521562, 0.0993039111521562, 0.2614257843723851, 0.2976054000388951,
    0.3696609138599017, 0.41681589265222346, 0.4810240984571372, 0.5372644961355958,
    0.5791825316605546, 0.5791825316605546, 0.7424373299418614, 0.7530096700595077,
    0.7530096700595077, 0.906789394649255, 0.9348353467475007, 1.0732676924300075,
    1.1096789897786465, 1.2573676114538015, 1.396016513175573, 1.5142180513519905,
    1.7248140344744871, 2.0772952939655918, 3.7276747214206036,
])

REPRO_X_GAMMA = np.array([
    1.00005000333357E-4, 0.019409251359818067, 0.04068123914173336, 0.06123553535520177,
    0.08444390461077006, 0.10548305587813296, 0.12805036553141316, 0.15022912395741614,
    0.17343564129838546, 0.19945618172583213, 0.22415461197566466, 0.24870841855300307,
    0.27466430083894233, 0.30210172980035993, 0.32823392882926855, 0.3554836985273914,
    0.3858289402923884, 0.41632088667531236, 0.44693110468213626, 0.4791849849063438,
    0.5122592850560248, 0.5457298342288471, 0.5798774432413372, 0.6180240086177533,
    0.6537701765373716, 0.6915901126921077, 0.7320916945823159, 0.775624812882162,
    0.819289912175568, 0.865797828169946, 0.9138084914304859, 0.9700061938204145,
    1.0218370263297414, 1.0794564486050406, 1.1378577173142972, 1.2065319159171217,
    1.2747986658568298, 1.3460486046891293, 1.4288468320054415, 1.512114305837601,
    1.61132514870369, 1.7160871295537956, 1.8279229962456165, 1.9702377298309495,
    2.125429826250494, 2.306241157048467, 2.5295702641685995, 2.807343679326415,
    3.2358050235131897, 3.953996926202895, 7.878844401611691,
])


def monotone_violation(spline, step_fraction=1e-5):
    """
    Sample ``spline`` densely over its breakpoint range.

    Returns
    -------
    (float, float)
        The smallest increment between consecutive samples and the smallest
        sampled derivative; both are >= 0 for a non-decreasing spline.
    """
    xmin, xmax = spline.x[0], spline.x[-1]
    n = int(round(1.0 / step_fraction)) + 1
    grid = np.linspace(xmin, xmax, n)
    values = spline(grid)
    slopes = spline.derivative()(grid)
    return float(np.min(np.diff(values))), float(np.min(slopes))


def jittered_cdf_sample(dist, intervals=50, rng=None):
    """
    Quantiles of ``dist`` at jittered, evenly spaced probabilities.

    Returns ``(x, y)`` where ``y`` are the nominal probabilities ``0, 1/intervals, ..., 1``.
    """
    rng = np.random.default_rng() if rng is None else rng
    step = 1.0 / intervals
    y = step * np.arange(intervals + 1)
    y[-1] = 1.0
    jitter = rng.uniform(-step / 20.0, step / 20.0, size=y.shape)
    probabilities = np.clip(y + jitter, 0.0001, 0.9999)
    x = dist.ppf(probabilities)
    return x, y


TRIAL_DISTRIBUTIONS = {
    "uniform"   : stats.uniform(),
    "normal"    : stats.norm(),
    "gamma"     : stats.gamma(1.0),
}
