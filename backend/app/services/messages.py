"""
User-facing messages (Arabic). The client shows them verbatim.
"""

# Validation
USERNAME_TOO_SHORT = "اسم المستخدم يجب أن يكون 3 أحرف على الأقل"
EMAIL_INVALID = "البريد الإلكتروني غير صالح"
PASSWORD_TOO_SHORT = "كلمة المرور يجب أن تكون 6 أحرف على الأقل"
TITLE_TOO_SHORT = "عنوان المناسبة يجب أن يكون 3 أحرف على الأقل"
TITLE_TOO_LONG = "عنوان المناسبة يجب ألا يتجاوز 200 حرف"
DESCRIPTION_TOO_SHORT = "وصف المناسبة يجب أن يكون 10 أحرف على الأقل"
PRICE_NOT_POSITIVE = "سعر المناسبة يجب أن يكون رقمًا موجبًا"
DATE_INVALID = "تاريخ المناسبة غير صالح"

# Auth
ACCOUNT_NOT_FOUND = "هذا الحساب غير موجود لدينا!!"
WRONG_CREDENTIALS = "خطأ في البريد الإلكتروني أو كلمة المرور!!"
ACCOUNT_EXISTS = "هذا الحساب موجود مسبقًا لدينا!!"
USER_NOT_FOUND = "المستخدم غير موجود!"

# Events
DUPLICATE_TITLE = "يوجد لدينا مناسبة بنفس هذا العنوان، الرجاء اختيار عنوان آخر!"
EVENT_NOT_FOUND = "المناسبة غير موجودة!"
EVENT_UPDATE_FORBIDDEN = "غير مصرح لك بتعديل هذه المناسبة!"
EVENT_DELETE_FORBIDDEN = "غير مصرح لك بحذف هذه المناسبة!"

# Bookings
ALREADY_BOOKED = "قد حجزت هذه المناسبة بالفعل مسبقًا!"
BOOKING_NOT_FOUND = "الحجز غير موجود!"
BOOKING_CANCEL_FORBIDDEN = "غير مصرح لك بإلغاء هذا الحجز!"
