import logging
import unittest

import automatone.intervals


class IntervalTests (unittest.TestCase):

	"""
	Tests for the scale, register and chord tables.
	"""

	def test_get_scale (self) -> None:

		"""
		Scale lookup should return a known definition.
		"""

		self.assertEqual(automatone.intervals.get_scale("major"), [0, 2, 4, 5, 7, 9, 11])
		self.assertEqual(automatone.intervals.get_scale("blues"), [0, 3, 5, 6, 7, 10])


	def test_unknown_scale_falls_back (self) -> None:

		"""
		An unknown scale should warn and give the pentatonic scale.
		"""

		with self.assertLogs("automatone.intervals", level=logging.WARNING):
			self.assertEqual(automatone.intervals.get_scale("lydian"), [0, 2, 4, 7, 9])


	def test_note_ranges_start_on_c (self) -> None:

		self.assertEqual(automatone.intervals.get_note_range("low")[0], 36)
		self.assertEqual(automatone.intervals.get_note_range("mid")[0], 48)
		self.assertEqual(automatone.intervals.get_note_range("high")[0], 60)

		with self.assertLogs("automatone.intervals", level=logging.WARNING):
			self.assertEqual(automatone.intervals.get_note_range("sub")[0], 48)


	def test_chord_intervals (self) -> None:

		self.assertEqual(automatone.intervals.get_chord_intervals("min7"), [0, 3, 7, 10])

		with self.assertLogs("automatone.intervals", level=logging.WARNING):
			self.assertEqual(automatone.intervals.get_chord_intervals("maj13"), [0, 4, 7, 11])


	def test_returned_lists_are_copies (self) -> None:

		scale = automatone.intervals.get_scale("major")
		scale.append(12)

		self.assertEqual(len(automatone.intervals.get_scale("major")), 7)


	def test_scale_degree_pitch (self) -> None:

		"""
		Indices past the scale length climb by octaves.
		"""

		pentatonic = automatone.intervals.get_scale("pentatonic")

		self.assertEqual(automatone.intervals.scale_degree_pitch(48, pentatonic, 0), 48)
		self.assertEqual(automatone.intervals.scale_degree_pitch(48, pentatonic, 4), 57)
		self.assertEqual(automatone.intervals.scale_degree_pitch(48, pentatonic, 6), 62)
		self.assertEqual(automatone.intervals.scale_degree_pitch(48, [], 6), 48)


if __name__ == "__main__":
	unittest.main()
