"""
Academy Records Tests

Attendance percentages, letter grades and the attendance/grade endpoints.
"""

import datetime
from decimal import Decimal
from unittest import mock

from django.contrib.auth.models import User
from django.db import DatabaseError
from django.test import SimpleTestCase
from rest_framework import status
from rest_framework.test import APITestCase

from academy.courses.models import Course
from academy.records.models import AttendanceRecord, Grade
from academy.records.services import (
    attendance_percentage,
    letter_grade,
    record_attendance,
    score_percentage,
)
from academy.users.models import Profile


class GradeCalculationTests(SimpleTestCase):
    def test_attendance_percentage(self):
        self.assertEqual(attendance_percentage(3, 1), 75.0)
        self.assertEqual(attendance_percentage(1, 2), 33.3)
        self.assertEqual(attendance_percentage(4, 0), 100.0)

    def test_attendance_without_sessions(self):
        self.assertIsNone(attendance_percentage(0, 0))

    def test_letter_grades(self):
        self.assertEqual(letter_grade(95, 100), "A")
        self.assertEqual(letter_grade(90, 100), "A")
        self.assertEqual(letter_grade(85, 100), "B")
        self.assertEqual(letter_grade(35, 50), "C")
        self.assertEqual(letter_grade(Decimal("60"), Decimal("100")), "D")
        self.assertEqual(letter_grade(59, 100), "F")

    def test_invalid_max_score(self):
        with self.assertRaises(ValueError):
            score_percentage(10, 0)
        with self.assertRaises(ValueError):
            letter_grade(10, -5)


class AttendanceViewTests(APITestCase):
    @classmethod
    def setUpTestData(cls):
        cls.teacher = User.objects.create_user(username="teacher", password="pw")
        cls.teacher.profile.role = Profile.Role.TEACHER
        cls.teacher.profile.save()
        cls.other_teacher = User.objects.create_user(username="otherTeacher", password="pw")
        cls.other_teacher.profile.role = Profile.Role.TEACHER
        cls.other_teacher.profile.save()
        cls.anna = User.objects.create_user(username="anna", password="pw")
        cls.ben = User.objects.create_user(username="ben", password="pw")
        cls.course = Course.objects.create(code="BIO110", name="Biology", teacher=cls.teacher)

    def record(self, date, present, absent, user=None):
        self.client.force_authenticate(user or self.teacher)
        return self.client.post(
            "/api/academy/attendance/",
            {
                "course": self.course.id,
                "date": date,
                "present_student_ids": [u.id for u in present],
                "absent_student_ids": [u.id for u in absent],
            },
            format="json",
        )

    def test_record_attendance(self):
        response = self.record("2024-03-01", [self.anna], [self.ben])
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        record = AttendanceRecord.objects.get(course=self.course, date=datetime.date(2024, 3, 1))
        self.assertEqual(list(record.present_students.all()), [self.anna])

    def test_same_day_is_updated_not_duplicated(self):
        self.record("2024-03-01", [self.anna], [self.ben])
        response = self.record("2024-03-01", [self.anna, self.ben], [])
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(AttendanceRecord.objects.filter(course=self.course).count(), 1)
        self.assertEqual(
            sorted(response.json()["present_student_ids"]), sorted([self.anna.id, self.ben.id])
        )

    def test_student_cannot_be_present_and_absent(self):
        response = self.record("2024-03-02", [self.anna], [self.anna])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_only_course_teacher_records(self):
        response = self.record("2024-03-03", [self.anna], [], user=self.other_teacher)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_student_cannot_record(self):
        response = self.record("2024-03-03", [self.anna], [], user=self.anna)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_failed_update_keeps_previous_attendance(self):
        day = datetime.date(2024, 3, 4)
        record, _ = record_attendance(self.course, day, [self.anna], [self.ben])

        with mock.patch.object(AttendanceRecord, "save", side_effect=DatabaseError("write failed")):
            with self.assertRaises(DatabaseError):
                record_attendance(self.course, day, [self.ben], [self.anna])

        self.assertEqual(list(record.present_students.all()), [self.anna])
        self.assertEqual(list(record.absent_students.all()), [self.ben])

    def test_summary(self):
        self.record("2024-03-01", [self.anna], [self.ben])
        self.record("2024-03-02", [self.anna], [self.ben])
        self.record("2024-03-03", [self.ben], [self.anna])

        self.client.force_authenticate(self.anna)
        response = self.client.get("/api/academy/attendance/summary/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        summary = response.json()
        self.assertEqual(len(summary), 1)
        self.assertEqual(summary[0]["course_code"], "BIO110")
        self.assertEqual(summary[0]["present"], 2)
        self.assertEqual(summary[0]["absent"], 1)
        self.assertEqual(summary[0]["percentage"], 66.7)

    def test_summary_without_sessions(self):
        self.client.force_authenticate(self.anna)
        response = self.client.get("/api/academy/attendance/summary/")
        self.assertEqual(response.json(), [])


class GradeViewTests(APITestCase):
    @classmethod
    def setUpTestData(cls):
        cls.teacher = User.objects.create_user(username="teacher", password="pw")
        cls.teacher.profile.role = Profile.Role.TEACHER
        cls.teacher.profile.save()
        cls.anna = User.objects.create_user(username="anna", password="pw")
        cls.ben = User.objects.create_user(username="ben", password="pw")
        cls.course = Course.objects.create(code="CHE120", name="Chemistry", teacher=cls.teacher)

    def test_teacher_records_grade(self):
        self.client.force_authenticate(self.teacher)
        response = self.client.post(
            "/api/academy/grades/",
            {
                "student": self.anna.id,
                "course": self.course.id,
                "assessment_name": "Midterm",
                "score": "85",
                "max_score": "100",
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.json()["letter"], "B")
        self.assertEqual(response.json()["percentage"], 85.0)

    def test_zero_max_score_rejected(self):
        self.client.force_authenticate(self.teacher)
        response = self.client.post(
            "/api/academy/grades/",
            {
                "student": self.anna.id,
                "course": self.course.id,
                "assessment_name": "Quiz",
                "score": "5",
                "max_score": "0",
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_student_sees_only_own_grades(self):
        Grade.objects.create(
            student=self.anna, course=self.course, assessment_name="Lab", score=Decimal("92"), max_score=Decimal("100")
        )
        Grade.objects.create(
            student=self.ben, course=self.course, assessment_name="Lab", score=Decimal("40"), max_score=Decimal("100")
        )

        self.client.force_authenticate(self.anna)
        response = self.client.get("/api/academy/grades/")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        grades = response.json()
        self.assertEqual(len(grades), 1)
        self.assertEqual(grades[0]["student"], self.anna.id)
        self.assertEqual(grades[0]["score"], "92.00")
        self.assertEqual(grades[0]["letter"], "A")

    def test_teacher_filters_by_student(self):
        Grade.objects.create(
            student=self.anna, course=self.course, assessment_name="Lab", score=Decimal("70"), max_score=Decimal("100")
        )
        Grade.objects.create(
            student=self.ben, course=self.course, assessment_name="Lab", score=Decimal("50"), max_score=Decimal("100")
        )

        self.client.force_authenticate(self.teacher)
        response = self.client.get(f"/api/academy/grades/?student={self.ben.id}")
        self.assertEqual([g["letter"] for g in response.json()], ["F"])

    def test_admin_sees_all_grades(self):
        admin = User.objects.create_user(username="admin", password="pw", is_staff=True)
        Grade.objects.create(
            student=self.anna, course=self.course, assessment_name="Lab", score=Decimal("70"), max_score=Decimal("100")
        )
        other_course = Course.objects.create(code="PHY130", name="Physics")
        Grade.objects.create(
            student=self.ben, course=other_course, assessment_name="Lab", score=Decimal("50"), max_score=Decimal("100")
        )

        self.client.force_authenticate(admin)
        response = self.client.get("/api/academy/grades/")
        self.assertEqual(len(response.json()), 2)

    def test_teacher_sees_only_own_courses(self):
        other_course = Course.objects.create(code="PHY130", name="Physics")
        Grade.objects.create(
            student=self.ben, course=other_course, assessment_name="Lab", score=Decimal("50"), max_score=Decimal("100")
        )

        self.client.force_authenticate(self.teacher)
        response = self.client.get("/api/academy/grades/")
        self.assertEqual(response.json(), [])
