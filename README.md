# medoidtemper

Find the K medoids of a set of points by treating the choice as a binary
quadratic problem with exactly K selected variables, and searching it with
parallel tempering: many replicas run Metropolis exchange moves (turn one
medoid off, turn another point on) at different temperatures, and after every
round neighbouring temperatures are offered for exchange.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Command line

```
medoidtemper params.txt
```

The single argument is a parameter file. Each line holds a name and a value
separated by whitespace; only the first word after the name is used. Blank
lines, and lines whose first word contains `/`, are skipped. Numeric values
are read from the leading part of the text, as `12abc` reads as `12`.

```
// problem
num_vars 150
num_k 3
B_scale_factor 1.0
D_scale_factor 0.5
problem_path data/
problem_name iris
cost_answer -1e30
// search
round_limit 100000
num_replicas_per_controller 32
num_controllers 1
num_cores_per_controller 32
T_max 10.0
T_min 0.01
ladder_init_mode 2
time_limit 60
```

The distance matrix is read from `problem_path + problem_name + ".d"`: a
whitespace-separated `num_vars` x `num_vars` matrix, one row per line. After
solving, the edge densities are computed from an adjacency matrix in
`problem_path + problem_name + ".adj"` of the same shape, holding 0 or 1.

`ladder_init_mode` chooses how the temperature ladder between `T_min` and
`T_max` is filled in:

- `0`: temperatures evenly spaced
- `1`: inverse temperatures evenly spaced
- `2`: temperatures geometrically spaced

The search stops when a replica's best cost reaches `cost_answer` or lower,
when the round counter reaches `round_limit`, when `time_limit` seconds have
passed, or when the best cost has not improved for 10,000 rounds in a row.

The program prints the lowest cost found, the run time, the number of rounds,
the indices of the chosen medoids, the cluster of every point (numbered from
0 to K-1, by the medoid's position in the list), and the inter-cluster,
overall and intra-cluster edge densities.

A missing parameter is reported and the program ends with status 0; a missing
or malformed problem file ends it with status 1.

## Python use

```python
from medoidtemper.engine import CardinalityEngine
from medoidtemper.model import CardinalityModel
from medoidtemper.params import read_params

params = read_params("params.txt")
model = CardinalityModel.from_params(params)
engine = CardinalityEngine.from_params(model, params, seed=1)

engine.solve()
medoids = engine.cost_min_state()
print(engine.cost_min(), engine.run_time, engine.current_round)
print(model.generate_assignments(medoids))
```

A model can also be built straight from a distance matrix, and the densities
computed from an adjacency matrix held in memory:

```python
import numpy as np
from medoidtemper.model import CardinalityModel

distances = np.array([[0, 1, 5, 6], [1, 0, 5, 6], [5, 5, 0, 1], [6, 6, 1, 0]])
model = CardinalityModel(distances, num_k=2, b_scale=1.0, d_scale=0.5)
labels = model.generate_assignments([0, 2])          # [0, 0, 1, 1]
adjacency = (distances == 1).astype(int)
print(model.k_values(labels, adjacency))             # KValues(k_inter=..., k=..., k_intra=...)
```

Modules:

- `medoidtemper.model`: `CardinalityModel`, `KValues`
- `medoidtemper.replica`: `CardinalityReplica`, `RoundRecord`
- `medoidtemper.ladder`: `TemperingController`, `LadderMode`
- `medoidtemper.engine`: `CardinalityEngine`, `folded_temperature_ids`
- `medoidtemper.params`: `read_params`, `parse_params`, `get_param`,
  `read_matrix`, `check_file`, `file_stem`, `MissingParameterError`
- `medoidtemper.display`, `medoidtemper.strings`, `medoidtemper.timer`:
  output, string and stopwatch helpers

## Limits

Replicas run one after another in a single process; there is no
multithreading. `num_cores_per_controller` only sets the order in which
replicas are visited within a round, and the load balancing between
temperatures is based on the measured time of each replica's round.