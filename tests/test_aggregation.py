from types import SimpleNamespace

import aggregation


def make_option(option_id, code):
    return SimpleNamespace(id=option_id, code=code)


def make_vote(voter, option_id, value):
    return SimpleNamespace(voter_name=voter, option_id=option_id, vote_value=value)


def make_ranking(first, second):
    return SimpleNamespace(first_option_id=first, second_option_id=second)


OPTIONS = [make_option("a", "A"), make_option("b", "B"), make_option("c", "C")]


def test_tallies_per_option():
    votes = [
        make_vote("Pat", "a", "yes"),
        make_vote("Sam", "a", "maybe"),
        make_vote("Lee", "a", "no"),
        make_vote("Kim", "a", "yes"),
        make_vote("Pat", "b", "no"),
    ]
    tallies = aggregation.summarize_votes(OPTIONS, votes)

    assert [t.option_id for t in tallies] == ["a", "b", "c"]
    a, b, c = tallies
    assert (a.yes, a.maybe, a.no, a.total, a.score) == (2, 1, 1, 4, 1)
    assert (b.yes, b.maybe, b.no, b.total, b.score) == (0, 0, 1, 1, -1)
    assert (c.total, c.score) == (0, 0)
    assert [(v.name, v.vote) for v in a.voters] == [("Pat", "yes"), ("Sam", "maybe"), ("Lee", "no"), ("Kim", "yes")]


def test_total_matches_votes_on_option():
    votes = [make_vote(f"v{i}", "a", value) for i, value in enumerate(["yes", "no", "maybe"] * 5)]
    votes.append(make_vote("x", "b", "yes"))
    a = aggregation.summarize_votes(OPTIONS, votes)[0]
    assert a.yes + a.maybe + a.no == a.total == 15


def test_maybe_never_affects_score():
    votes = [make_vote(f"v{i}", "a", "maybe") for i in range(7)]
    a = aggregation.summarize_votes(OPTIONS, votes)[0]
    assert a.score == 0
    assert a.total == 7


def test_votes_for_unknown_options_are_ignored():
    tallies = aggregation.summarize_votes(OPTIONS, [make_vote("Pat", "zzz", "yes")])
    assert all(t.total == 0 for t in tallies)
    assert not aggregation.has_votes(tallies)


def test_percentages():
    votes = [make_vote("Pat", "a", "yes"), make_vote("Sam", "a", "yes"), make_vote("Lee", "a", "no"), make_vote("Kim", "a", "maybe")]
    a, b, _ = aggregation.summarize_votes(OPTIONS, votes)
    assert (a.yes_percent, a.maybe_percent, a.no_percent) == (50.0, 25.0, 25.0)
    assert (b.yes_percent, b.maybe_percent, b.no_percent) == (0.0, 0.0, 0.0)


def test_rank_summaries_breaks_ties_by_code():
    options = [make_option("c", "C"), make_option("b", "B"), make_option("a", "A")]
    votes = [make_vote("Pat", "c", "yes"), make_vote("Pat", "a", "yes"), make_vote("Pat", "b", "no")]
    ranked = aggregation.rank_summaries(aggregation.summarize_votes(options, votes))
    assert [t.option.code for t in ranked] == ["A", "C", "B"]


def test_leading_score_requires_positive_max():
    negative = aggregation.summarize_votes(OPTIONS, [make_vote("Pat", "a", "no")])
    assert aggregation.leading_score(negative) is None

    empty = aggregation.summarize_votes(OPTIONS, [])
    assert aggregation.leading_score(empty) is None
    assert aggregation.leading_score([]) is None

    votes = [make_vote("Pat", "a", "yes"), make_vote("Sam", "a", "yes"), make_vote("Pat", "b", "yes"), make_vote("Sam", "b", "yes")]
    tallies = aggregation.summarize_votes(OPTIONS, votes)
    leading = aggregation.leading_score(tallies)
    assert leading == 2
    assert [aggregation.is_leader(t, leading) for t in tallies] == [True, True, False]


def test_ranking_points():
    rankings = [make_ranking("a", "b"), make_ranking("b", "a"), make_ranking("b", "c")]
    tallies = aggregation.summarize_rankings(OPTIONS, rankings)

    by_id = {t.option_id: t for t in tallies}
    assert (by_id["a"].first_place_votes, by_id["a"].second_place_votes, by_id["a"].points) == (1, 1, 3)
    assert (by_id["b"].first_place_votes, by_id["b"].second_place_votes, by_id["b"].points) == (2, 1, 5)
    assert (by_id["c"].first_place_votes, by_id["c"].second_place_votes, by_id["c"].points) == (0, 1, 1)
    assert [t.option_id for t in tallies] == ["b", "a", "c"]


def test_ranking_ties_break_by_code():
    tallies = aggregation.summarize_rankings(list(reversed(OPTIONS)), [])
    assert [t.option.code for t in tallies] == ["A", "B", "C"]
