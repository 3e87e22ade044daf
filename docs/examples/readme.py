from mgftables import parse

# Parse an MGF file into linked spectrum and fragment tables
tables = parse("tests/test_data/example.mgf")
print(tables)

# Get the number of spectra and fragments
print(len(tables.spectra), len(tables.fragments))

# Get a specific spectrum and its fragments
spec = tables.spectra[1]
print(f"Title={spec.title}; Precursor={spec.precursor_mz}; Num Peaks={spec.n_fragments}")
print(tables.fragments_for(1))

# Loop over the spectra and count the distinct charge states
charges = set()
for record, fragments in tables:
    charges.add(record.charge)

print(f"\n{len(charges)} distinct charge states over {len(tables)} spectra")

# Hand the tables to pandas
spectra_df, fragments_df = tables.to_dataframes()
print(spectra_df)
