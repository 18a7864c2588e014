from mpfluor import schema as ms
from mpfluor.export import to_dataframe

gen = ms.DatasetGeneration(settings=ms.Settings(random_seed=100))
result = gen.run()

sweep = to_dataframe(result.sweep)
print(
    sweep.groupby(["polymer_type", "excitation_nm"])["digital_counts"]
    .mean()
    .unstack()
)

filtration = to_dataframe(result.filtration)
print(filtration.groupby("polymer_type")["removal_efficiency"].describe())
