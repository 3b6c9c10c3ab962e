import decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Profile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "role",
                    models.CharField(
                        choices=[("admin", "Admin"), ("teacher", "Teacher"), ("student", "Student"), ("parent", "Parent")],
                        default="student",
                        max_length=16,
                        verbose_name="Role",
                    ),
                ),
                (
                    "fees_paid",
                    models.BooleanField(
                        default=False,
                        help_text="Registration fee has been paid and verified",
                        verbose_name="Fees Paid",
                    ),
                ),
                (
                    "stripe_customer_id",
                    models.CharField(
                        blank=True,
                        help_text="Cached payment gateway customer, reused across checkouts",
                        max_length=255,
                        null=True,
                        verbose_name="Stripe Customer ID",
                    ),
                ),
                ("phone", models.CharField(blank=True, max_length=32, verbose_name="Phone")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "user",
                    models.OneToOneField(
                        help_text="Associated user account",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="profile",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="User",
                    ),
                ),
            ],
            options={
                "verbose_name": "User Profile",
                "verbose_name_plural": "User Profiles",
                "db_table": "academy_profile",
            },
        ),
        migrations.CreateModel(
            name="Course",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(max_length=32, unique=True, verbose_name="Code")),
                ("name", models.CharField(max_length=255, verbose_name="Name")),
                ("description", models.TextField(blank=True, verbose_name="Description")),
                ("room", models.CharField(blank=True, max_length=64, verbose_name="Room")),
                (
                    "price",
                    models.PositiveIntegerField(
                        default=0,
                        help_text="Course fee in minor currency units (e.g. cents), 0 = free",
                        verbose_name="Price",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "teacher",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="taught_courses",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Teacher",
                    ),
                ),
            ],
            options={
                "verbose_name": "Course",
                "verbose_name_plural": "Courses",
                "ordering": ["code"],
            },
        ),
        migrations.CreateModel(
            name="CourseEnrollment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "approval_status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("approved", "Approved"), ("rejected", "Rejected")],
                        default="pending",
                        max_length=16,
                        verbose_name="Approval status",
                    ),
                ),
                (
                    "enrollment_status",
                    models.CharField(
                        choices=[("not_enrolled", "Not enrolled"), ("enrolled", "Enrolled")],
                        default="not_enrolled",
                        max_length=16,
                        verbose_name="Enrollment status",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "course",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="enrollments",
                        to="academy.course",
                        verbose_name="Course",
                    ),
                ),
                (
                    "student",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="enrollments",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Student",
                    ),
                ),
            ],
            options={
                "verbose_name": "Course enrollment",
                "verbose_name_plural": "Course enrollments",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["course", "approval_status"], name="academy_cou_course__3f1a2b_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("student", "course"), name="unique_enrollment_per_student_course"
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="AttendanceRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date", models.DateField(verbose_name="Date")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "course",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="attendance_records",
                        to="academy.course",
                        verbose_name="Course",
                    ),
                ),
                (
                    "present_students",
                    models.ManyToManyField(
                        blank=True,
                        related_name="attended_sessions",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Present students",
                    ),
                ),
                (
                    "absent_students",
                    models.ManyToManyField(
                        blank=True,
                        related_name="missed_sessions",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Absent students",
                    ),
                ),
            ],
            options={
                "verbose_name": "Attendance record",
                "verbose_name_plural": "Attendance records",
                "ordering": ["-date"],
                "unique_together": {("course", "date")},
            },
        ),
        migrations.CreateModel(
            name="Grade",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("assessment_name", models.CharField(max_length=255, verbose_name="Assessment")),
                (
                    "score",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=7,
                        validators=[django.core.validators.MinValueValidator(0)],
                        verbose_name="Score",
                    ),
                ),
                (
                    "max_score",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=7,
                        validators=[django.core.validators.MinValueValidator(decimal.Decimal("0.01"))],
                        verbose_name="Max score",
                    ),
                ),
                ("graded_at", models.DateTimeField(default=django.utils.timezone.now, verbose_name="Graded at")),
                (
                    "course",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="grades",
                        to="academy.course",
                        verbose_name="Course",
                    ),
                ),
                (
                    "student",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="grades",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Student",
                    ),
                ),
            ],
            options={
                "verbose_name": "Grade",
                "verbose_name_plural": "Grades",
                "ordering": ["-graded_at"],
                "indexes": [
                    models.Index(fields=["student", "course"], name="academy_gra_student_7c4d9e_idx"),
                ],
            },
        ),
    ]
